"""Subtitle service: list and download subtitles through yt-dlp."""

import logging
import os
import tempfile
from typing import List, Optional

from ..config.config_manager import get_config_value
from ..errors import (
    InvalidUrlError,
    NoSubtitlesError,
    SubtitleAdapterError,
    SubtitleLanguageNotFoundError,
)
from ..utils.file_utils import read_text_file
from ..utils.subtitle_utils import remove_timestamps, subtitle_language_from_filename
from ..utils.url_utils import detect_platform, validate_url
from .subtitle_listing import SubtitleListing, normalize_listing, parse_listing
from .ytdlp_runner import YtDlpRunner

logger = logging.getLogger(__name__)

OUTPUT_TEMPLATE = '%(title)s.%(ext)s'


class SubtitleService:
    """字幕服务 - 通过 yt-dlp 列出和下载字幕"""

    def __init__(self, runner: Optional[YtDlpRunner] = None,
                 default_language: Optional[str] = None,
                 subtitle_extensions: Optional[List[str]] = None,
                 temp_prefix: Optional[str] = None):
        """初始化字幕服务

        Args:
            runner: yt-dlp 执行器
            default_language: 未指定语言时使用的字幕语言
            subtitle_extensions: 视为字幕文件的扩展名
            temp_prefix: 临时目录名前缀
        """
        self.runner = runner or YtDlpRunner()
        self.default_language = default_language or get_config_value('download.default_language', 'en')
        self.subtitle_extensions = tuple(
            subtitle_extensions or get_config_value('download.subtitle_extensions', ['.vtt'])
        )
        self.temp_prefix = temp_prefix or get_config_value('download.temp_prefix', 'ytdlp-subtitles-')

    @staticmethod
    def _validate(url):
        if not validate_url(url):
            logger.warning(f"无效的URL: {url!r}")
            raise InvalidUrlError(url)
        return url.strip()

    def _list_output(self, url: str) -> str:
        return self.runner.run([
            '--ignore-config',
            '--list-subs',
            '--write-auto-sub',
            '--skip-download',
            url,
        ])

    def get_listing(self, url: str) -> SubtitleListing:
        """获取结构化的字幕列表"""
        url = self._validate(url)
        return parse_listing(self._list_output(url))

    def list_subtitles(self, url: str) -> str:
        """列出视频可用的字幕语言

        Args:
            url: 视频URL

        Returns:
            str: 整理后的字幕列表文本

        Raises:
            InvalidUrlError: URL格式无效（不会调用 yt-dlp）
            ToolInvocationError: yt-dlp 执行失败
        """
        url = self._validate(url)
        logger.info(f"列出字幕: {url} (平台: {detect_platform(url) or 'unknown'})")
        return normalize_listing(self._list_output(url))

    def download_subtitles(self, url: str, language: Optional[str] = None,
                           strip_timestamps: bool = False) -> str:
        """下载指定语言的字幕

        Args:
            url: 视频URL
            language: 语言代码，例如 'en'、'zh-Hant'，默认使用配置的语言
            strip_timestamps: 是否去掉时间轴和标签，只返回纯文本

        Returns:
            str: 字幕内容

        Raises:
            InvalidUrlError: URL格式无效
            SubtitleLanguageNotFoundError: 请求的语言没有字幕
            NoSubtitlesError: 视频没有任何字幕
            ToolInvocationError: yt-dlp 执行失败
        """
        url = self._validate(url)
        language = (language or '').strip() or self.default_language
        logger.info(f"下载字幕: {url}, 语言: {language}, 去除时间轴: {strip_timestamps}")

        with tempfile.TemporaryDirectory(prefix=self.temp_prefix, ignore_cleanup_errors=True) as temp_dir:
            self.runner.run([
                '--ignore-config',
                '--write-sub',
                '--write-auto-sub',
                '--sub-lang', language,
                '--skip-download',
                '--output', os.path.join(temp_dir, OUTPUT_TEMPLATE),
                url,
            ])

            subtitle_files = self._collect_subtitle_files(temp_dir, language)
            if not subtitle_files:
                raise self._language_not_found(url, language)

            logger.info(f"找到 {len(subtitle_files)} 个字幕文件: {subtitle_files}")
            output = self._merge_files(temp_dir, subtitle_files)

        if strip_timestamps:
            output = remove_timestamps(output)
        return output

    def _collect_subtitle_files(self, directory: str, language: str) -> List[str]:
        """找出字幕文件；与请求语言完全一致的排在前面，其余按文件名排序"""
        files = [
            name for name in os.listdir(directory)
            if name.endswith(self.subtitle_extensions)
        ]
        return sorted(
            files,
            key=lambda name: (subtitle_language_from_filename(name) != language, name),
        )

    @staticmethod
    def _merge_files(directory: str, filenames: List[str]) -> str:
        output = ''
        for name in filenames:
            if output and not output.endswith('\n'):
                output += '\n'
            output += read_text_file(os.path.join(directory, name))
        return output

    def _language_not_found(self, url: str, language: str) -> SubtitleAdapterError:
        """构造“找不到字幕”的错误，尽量附上可用语言"""
        try:
            listing = self.get_listing(url)
        except SubtitleAdapterError as e:
            logger.warning(f"获取可用字幕语言失败: {str(e)}")
            return SubtitleLanguageNotFoundError(language)

        available = listing.language_codes()
        if not available:
            logger.warning(f"视频没有任何字幕: {url}")
            return NoSubtitlesError(f"No subtitles available for this video: {url}")

        logger.warning(f"没有 {language} 字幕，可用语言: {available}")
        return SubtitleLanguageNotFoundError(language, available)
