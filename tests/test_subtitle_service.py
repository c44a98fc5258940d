import os

import pytest

from ytdlp_subtitles.errors import (
    InvalidUrlError,
    NoSubtitlesError,
    SubtitleLanguageNotFoundError,
    ToolInvocationError,
)
from ytdlp_subtitles.services.subtitle_service import SubtitleService

from tests.fakes import (
    AUTO_AND_MANUAL_LISTING,
    AUTO_ONLY_LISTING,
    NO_TRACKS_LISTING,
    SAMPLE_VTT,
    FakeRunner,
)

URL = "https://www.youtube.com/watch?v=jNQXAC9IVRw"


def _service(runner):
    return SubtitleService(runner=runner, default_language="en")


def test_list_subtitles_rejects_invalid_url_without_running_tool():
    runner = FakeRunner(listing=AUTO_AND_MANUAL_LISTING)

    with pytest.raises(InvalidUrlError, match="Invalid or unsupported URL format"):
        _service(runner).list_subtitles("not-a-url")
    assert runner.calls == []


def test_list_subtitles_invokes_ytdlp_and_normalizes():
    runner = FakeRunner(listing=AUTO_ONLY_LISTING)

    result = _service(runner).list_subtitles(URL)

    assert runner.calls == [[
        "--ignore-config", "--list-subs", "--write-auto-sub", "--skip-download", URL,
    ]]
    assert "en-orig" in result
    assert "French" not in result


def test_list_subtitles_propagates_tool_failure():
    runner = FakeRunner(listing_error=ToolInvocationError("yt-dlp exited with code 1: ERROR: boom"))

    with pytest.raises(ToolInvocationError, match="boom"):
        _service(runner).list_subtitles(URL)


def test_download_subtitles_returns_file_content():
    runner = FakeRunner(files={"Me at the zoo.en.vtt": SAMPLE_VTT})

    result = _service(runner).download_subtitles(URL, "en")

    assert result == SAMPLE_VTT
    args = runner.calls[0]
    assert args[:6] == ["--ignore-config", "--write-sub", "--write-auto-sub", "--sub-lang", "en", "--skip-download"]
    assert args[6] == "--output"
    assert args[7].endswith("%(title)s.%(ext)s")
    assert args[-1] == URL


def test_download_subtitles_strips_timestamps():
    runner = FakeRunner(files={"Me at the zoo.en.vtt": SAMPLE_VTT})

    result = _service(runner).download_subtitles(URL, "en", strip_timestamps=True)

    assert result == "Hello world\nsecond line"


def test_download_uses_default_language():
    runner = FakeRunner(files={"clip.ja.vtt": SAMPLE_VTT})
    service = SubtitleService(runner=runner, default_language="ja")

    service.download_subtitles(URL, None)

    assert runner.calls[0][4] == "ja"


def test_download_merges_every_subtitle_file():
    first = "WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nexact language\n"
    second = "WEBVTT\n\n00:00:01.000 --> 00:00:02.000\noriginal track"
    runner = FakeRunner(files={
        "Me at the zoo.en.vtt": first,
        "Me at the zoo.en-orig.vtt": second,
        "Me at the zoo.info.json": "{}",
    })

    result = _service(runner).download_subtitles(URL, "en")

    assert first in result
    assert second in result
    assert result.index("exact language") < result.index("original track")
    assert "{}" not in result


def test_download_inserts_newline_between_files():
    runner = FakeRunner(files={"a.en.vtt": "WEBVTT\nfirst", "b.en.vtt": "WEBVTT\nsecond\n"})

    result = _service(runner).download_subtitles(URL, "en")

    assert result == "WEBVTT\nfirst\nWEBVTT\nsecond\n"


def test_download_removes_scratch_directory():
    runner = FakeRunner(files={"clip.en.vtt": SAMPLE_VTT})

    _service(runner).download_subtitles(URL, "en")

    assert runner.output_dirs
    assert not os.path.exists(runner.output_dirs[0])


def test_download_removes_scratch_directory_on_failure():
    runner = FakeRunner(
        files={"partial.en.vtt": SAMPLE_VTT},
        download_error=ToolInvocationError("yt-dlp exited with code 1: ERROR: network"),
    )

    with pytest.raises(ToolInvocationError):
        _service(runner).download_subtitles(URL, "en")
    assert not os.path.exists(runner.output_dirs[0])


def test_scratch_directories_are_unique_per_call():
    runner = FakeRunner(files={"clip.en.vtt": SAMPLE_VTT})
    service = _service(runner)

    service.download_subtitles(URL, "en")
    service.download_subtitles(URL, "en")

    assert runner.output_dirs[0] != runner.output_dirs[1]


def test_missing_language_lists_available_languages():
    runner = FakeRunner(listing=AUTO_AND_MANUAL_LISTING)

    with pytest.raises(SubtitleLanguageNotFoundError) as excinfo:
        _service(runner).download_subtitles(URL, "xx")

    assert excinfo.value.language == "xx"
    assert excinfo.value.available == ["en-orig", "en", "de"]
    assert str(excinfo.value) == (
        "No subtitles found for language 'xx'. Available languages: en-orig, en, de"
    )
    assert not os.path.exists(runner.output_dirs[0])


def test_missing_language_when_listing_fails_uses_generic_message():
    runner = FakeRunner(listing_error=ToolInvocationError("yt-dlp exited with code 1"))

    with pytest.raises(SubtitleLanguageNotFoundError) as excinfo:
        _service(runner).download_subtitles(URL, "xx")

    assert str(excinfo.value) == "No subtitles found for language 'xx'"
    assert excinfo.value.available == []


def test_video_without_any_subtitles():
    runner = FakeRunner(listing=NO_TRACKS_LISTING)

    with pytest.raises(NoSubtitlesError):
        _service(runner).download_subtitles(URL, "en")


def test_download_rejects_invalid_url():
    runner = FakeRunner()

    with pytest.raises(InvalidUrlError):
        _service(runner).download_subtitles("ftp://example.com/video", "en")
    assert runner.calls == []


def test_download_decodes_utf8_bom():
    runner = FakeRunner(files={"clip.en.vtt": "\ufeffWEBVTT\n\n00:00:01.000 --> 00:00:02.000\ncafé\n".encode("utf-8")})

    result = _service(runner).download_subtitles(URL, "en", strip_timestamps=True)

    assert result == "café"
