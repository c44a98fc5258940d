"""Exception types raised by the subtitle services."""


class SubtitleAdapterError(Exception):
    """Base error for the yt-dlp subtitle service."""


class ConfigError(SubtitleAdapterError, ValueError):
    """Raised when the loaded configuration is invalid."""


class InvalidUrlError(SubtitleAdapterError, ValueError):
    """Raised before any yt-dlp call when the URL is not supported."""

    def __init__(self, url=None, message="Invalid or unsupported URL format"):
        super().__init__(message)
        self.url = url


class ToolInvocationError(SubtitleAdapterError):
    """Raised when yt-dlp exits abnormally."""

    def __init__(self, message, returncode=None, stderr=""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ToolNotFoundError(ToolInvocationError):
    """Raised when the yt-dlp executable cannot be started."""


class NoSubtitlesError(SubtitleAdapterError):
    """Raised when a video has no subtitle tracks at all."""


class SubtitleLanguageNotFoundError(SubtitleAdapterError, LookupError):
    """Raised when the requested language produced no subtitle files."""

    def __init__(self, language, available=None):
        self.language = language
        self.available = list(available or [])
        if self.available:
            message = (
                f"No subtitles found for language '{language}'. "
                f"Available languages: {', '.join(self.available)}"
            )
        else:
            message = f"No subtitles found for language '{language}'"
        super().__init__(message)
