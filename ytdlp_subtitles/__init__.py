"""
yt-dlp Subtitle Service

A small service that lists and downloads video subtitles from YouTube and
other platforms by driving the yt-dlp command-line tool.
"""

__version__ = "1.0.0"
__author__ = "Subtitle Processor Team"
