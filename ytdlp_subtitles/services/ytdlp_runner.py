"""Thin wrapper around the yt-dlp command-line tool."""

import logging
import shutil
import subprocess
from typing import List, Optional

from ..config.config_manager import get_config_value
from ..errors import ToolInvocationError, ToolNotFoundError

logger = logging.getLogger(__name__)


class YtDlpRunner:
    """执行 yt-dlp 并返回标准输出"""

    def __init__(self, executable: Optional[str] = None, timeout: Optional[float] = None):
        """初始化 yt-dlp 执行器

        Args:
            executable: yt-dlp 可执行文件，默认读取配置 ytdlp.executable
            timeout: 超时时间（秒），默认读取配置 ytdlp.timeout，None 表示不限制
        """
        self.executable = executable or get_config_value('ytdlp.executable', 'yt-dlp')
        self.timeout = timeout if timeout is not None else get_config_value('ytdlp.timeout')

    def is_available(self) -> bool:
        """检查 yt-dlp 是否在 PATH 中"""
        return shutil.which(self.executable) is not None

    def version(self) -> Optional[str]:
        """获取 yt-dlp 版本，不可用时返回 None"""
        try:
            return self.run(['--version']).strip() or None
        except ToolInvocationError as e:
            logger.warning(f"获取yt-dlp版本失败: {str(e)}")
            return None

    def run(self, args: List[str]) -> str:
        """执行一次 yt-dlp，返回标准输出

        Args:
            args: 传给 yt-dlp 的参数列表

        Returns:
            str: 捕获的标准输出

        Raises:
            ToolNotFoundError: 找不到可执行文件
            ToolInvocationError: 非零退出或超时
        """
        cmd = [self.executable, *args]
        logger.debug(f"执行命令: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            logger.error(f"未找到yt-dlp: {self.executable}")
            raise ToolNotFoundError(
                f"{self.executable} not found. Please install yt-dlp and make sure it is on PATH.",
                stderr=str(e),
            ) from e
        except subprocess.TimeoutExpired as e:
            logger.error(f"yt-dlp执行超时({self.timeout}s): {' '.join(cmd)}")
            raise ToolInvocationError(
                f"{self.executable} timed out after {self.timeout} seconds"
            ) from e

        stderr = (result.stderr or '').strip()
        if result.returncode != 0:
            detail = stderr or (result.stdout or '').strip() or 'no error output'
            logger.error(f"yt-dlp执行失败(退出码 {result.returncode}): {detail}")
            raise ToolInvocationError(
                f"{self.executable} exited with code {result.returncode}: {detail}",
                returncode=result.returncode,
                stderr=stderr,
            )

        if stderr:
            logger.warning(f"yt-dlp输出警告: {stderr}")
        return result.stdout or ''
