import pytest

from ytdlp_subtitles.config import config_manager
from ytdlp_subtitles.config.config_manager import ConfigManager, get_config_value
from ytdlp_subtitles.errors import ConfigError


def test_defaults_when_file_missing(tmp_path):
    manager = ConfigManager(str(tmp_path / "missing.yml"))

    assert manager.get_config_value("download.default_language") == "en"
    assert manager.get_config_value("download.subtitle_extensions") == [".vtt"]
    assert manager.get_config_value("ytdlp.executable") == "yt-dlp"
    assert manager.get_config_value("file.max_filename_length") == 50
    assert manager.get_config_value("no.such.key", "fallback") == "fallback"


def test_yaml_values_override_defaults(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(
        "download:\n"
        "  default_language: zh-Hant\n"
        "ytdlp:\n"
        "  timeout: 90\n",
        encoding="utf-8",
    )

    manager = ConfigManager(str(path))

    assert manager.get_config_value("download.default_language") == "zh-Hant"
    assert manager.get_config_value("ytdlp.timeout") == 90
    # untouched keys keep their defaults
    assert manager.get_config_value("download.temp_prefix") == "ytdlp-subtitles-"


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "config.yml"
    path.write_text("download:\n  default_language: fr\n", encoding="utf-8")
    monkeypatch.setenv("YTDLP_DEFAULT_SUBTITLE_LANG", "ja")
    monkeypatch.setenv("YTDLP_MAX_FILENAME_LENGTH", "80")
    monkeypatch.setenv("YTDLP_SANITIZE_RESERVED_NAMES", "CON, NUL")

    manager = ConfigManager(str(path))

    assert manager.get_config_value("download.default_language") == "ja"
    assert manager.get_config_value("file.max_filename_length") == 80
    assert manager.get_config_value("file.sanitize.reserved_names") == ["CON", "NUL"]


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "env.yml"
    path.write_text("download:\n  default_language: de\n", encoding="utf-8")
    monkeypatch.setenv(config_manager.CONFIG_ENV_VAR, str(path))

    assert get_config_value("download.default_language") == "de"


def test_invalid_yaml_falls_back_to_defaults(tmp_path):
    path = tmp_path / "broken.yml"
    path.write_text("download: [unclosed\n", encoding="utf-8")

    manager = ConfigManager(str(path))

    assert manager.get_config_value("download.default_language") == "en"


@pytest.mark.parametrize("language", ["english", "e", "en_US", ""])
def test_invalid_default_language_is_rejected(tmp_path, monkeypatch, language):
    path = tmp_path / "config.yml"
    path.write_text(f"download:\n  default_language: '{language}'\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        ConfigManager(str(path))


def test_short_filename_length_is_rejected(monkeypatch):
    monkeypatch.setenv("YTDLP_MAX_FILENAME_LENGTH", "4")

    with pytest.raises(ConfigError, match="at least 5"):
        ConfigManager()


def test_non_numeric_timeout_is_rejected(monkeypatch):
    monkeypatch.setenv("YTDLP_TIMEOUT", "soon")

    with pytest.raises(ConfigError):
        ConfigManager()


def test_reload_picks_up_changes(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("download:\n  default_language: en\n", encoding="utf-8")
    manager = ConfigManager(str(path))

    path.write_text("download:\n  default_language: ko\n", encoding="utf-8")
    manager.reload_config()

    assert manager.get_config_value("download.default_language") == "ko"


@pytest.mark.parametrize("timeout", ["120s", "0", "-5", "true", "[30]"])
def test_invalid_yaml_timeout_is_rejected(tmp_path, timeout):
    path = tmp_path / "config.yml"
    path.write_text(f"ytdlp:\n  timeout: {timeout}\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="ytdlp.timeout"):
        ConfigManager(str(path))


def test_numeric_string_timeout_is_coerced(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("ytdlp:\n  timeout: '45.5'\n", encoding="utf-8")

    manager = ConfigManager(str(path))

    assert manager.get_config_value("ytdlp.timeout") == 45.5


@pytest.mark.parametrize("timeout", ["0", "-1"])
def test_non_positive_env_timeout_is_rejected(monkeypatch, timeout):
    monkeypatch.setenv("YTDLP_TIMEOUT", timeout)

    with pytest.raises(ConfigError, match="positive"):
        ConfigManager()


def test_bad_timeout_fails_app_startup(tmp_path):
    from ytdlp_subtitles.main import create_app

    path = tmp_path / "config.yml"
    path.write_text("ytdlp:\n  timeout: 120s\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        create_app(str(path))
