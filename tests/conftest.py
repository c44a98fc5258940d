import os

import pytest

from ytdlp_subtitles.config import config_manager


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    for key in list(os.environ):
        if key.startswith("YTDLP_") or key == "LOG_LEVEL":
            monkeypatch.delenv(key, raising=False)
    config_manager.set_config_manager(None)
    yield
    config_manager.set_config_manager(None)
