"""Utility functions and helpers."""

from .file_utils import detect_file_encoding, read_text_file, sanitize_filename
from .subtitle_utils import remove_timestamps, subtitle_language_from_filename
from .url_utils import detect_platform, validate_url

__all__ = [
    'detect_file_encoding',
    'read_text_file',
    'sanitize_filename',
    'remove_timestamps',
    'subtitle_language_from_filename',
    'detect_platform',
    'validate_url',
]
