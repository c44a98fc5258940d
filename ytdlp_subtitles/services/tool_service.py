"""
Tool interface for agents.

Exposes the subtitle operations as named tools that an agent can discover
with `list_tools` and invoke with `call_tool`:
- list_subtitle_languages: list the subtitle tracks available for a video
- download_video_subtitles: download subtitles in one language
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from ..errors import SubtitleAdapterError
from .subtitle_service import SubtitleService

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    """工具执行结果"""
    text: str
    is_error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": self.is_error,
        }


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class SubtitleToolService:
    """
    字幕工具服务

    把 SubtitleService 的两个操作包装为可被 Agent 调用的工具，
    任何失败都转换为 isError 结果，不会向调用方抛出异常。
    """

    def __init__(self, subtitle_service: SubtitleService):
        self.subtitle_service = subtitle_service
        self._tools: Dict[str, Callable[[Dict[str, Any]], str]] = {
            "list_subtitle_languages": self._tool_list_subtitle_languages,
            "download_video_subtitles": self._tool_download_video_subtitles,
        }

    def list_tools(self) -> List[Dict[str, Any]]:
        """列出所有可用工具"""
        return [
            {
                "name": "list_subtitle_languages",
                "description": (
                    "List all available subtitle languages and their formats for a video. "
                    "Auto-translated captions are omitted."
                ),
                "inputSchema": {
                    "type": "object",
                    "properties": {
                        "url": {"type": "string", "description": "URL of the video"},
                    },
                    "required": ["url"],
                },
            },
            {
                "name": "download_video_subtitles",
                "description": (
                    "Download subtitles for a video in the given language. "
                    "Set without_timestamps to get plain text only."
                ),
                "inputSchema": {
                    "type": "object",
                    "properties": {
                        "url": {"type": "string", "description": "URL of the video"},
                        "language": {
                            "type": "string",
                            "description": (
                                "Language code (e.g. 'en', 'zh-Hant', 'ja'). "
                                f"Defaults to '{self.subtitle_service.default_language}'."
                            ),
                        },
                        "without_timestamps": {
                            "type": "boolean",
                            "description": "Remove timing lines and markup from the output",
                            "default": False,
                        },
                    },
                    "required": ["url"],
                },
            },
        ]

    def call_tool(self, name: str, arguments: Dict[str, Any]) -> ToolResult:
        """
        调用指定工具

        Args:
            name: 工具名称
            arguments: 工具参数

        Returns:
            ToolResult 包含执行结果或错误信息
        """
        if name not in self._tools:
            return ToolResult(
                text=f"Unknown tool: {name}. Available: {list(self._tools.keys())}",
                is_error=True,
            )

        try:
            text = self._tools[name](arguments or {})
            return ToolResult(text=text)
        except (SubtitleAdapterError, ValueError) as e:
            logger.warning(f"工具 {name} 执行失败: {str(e)}")
            return ToolResult(text=f"Error: {str(e)}", is_error=True)
        except Exception as e:
            logger.exception(f"工具 {name} 出现未预期的错误")
            return ToolResult(text=f"Error: {str(e)}", is_error=True)

    def _tool_list_subtitle_languages(self, args: Dict[str, Any]) -> str:
        url = args.get("url")
        if not url:
            raise ValueError("url is required")
        return self.subtitle_service.list_subtitles(url)

    def _tool_download_video_subtitles(self, args: Dict[str, Any]) -> str:
        url = args.get("url")
        if not url:
            raise ValueError("url is required")
        return self.subtitle_service.download_subtitles(
            url,
            language=args.get("language"),
            strip_timestamps=_as_bool(args.get("without_timestamps", False)),
        )
