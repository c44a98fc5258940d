"""Service layer modules."""

from .logging_service import LoggingService
from .ytdlp_runner import YtDlpRunner
from .subtitle_listing import SubtitleListing, SubtitleTrack, normalize_listing, parse_listing
from .subtitle_service import SubtitleService
from .tool_service import SubtitleToolService, ToolResult

__all__ = [
    'LoggingService',
    'YtDlpRunner',
    'SubtitleListing',
    'SubtitleTrack',
    'normalize_listing',
    'parse_listing',
    'SubtitleService',
    'SubtitleToolService',
    'ToolResult',
]
