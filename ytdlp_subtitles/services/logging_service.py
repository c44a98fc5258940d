"""Logging service for the yt-dlp subtitle service."""

import logging
import sys


class ColoredFormatter(logging.Formatter):
    """自定义的日志格式化器，添加颜色"""

    # 颜色代码
    grey = "\x1b[38;21m"
    blue = "\x1b[36m"
    yellow = "\x1b[33;21m"
    red = "\x1b[31;21m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    # 日志格式
    format_str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    FORMATS = {
        logging.DEBUG: blue + format_str + reset,
        logging.INFO: grey + format_str + reset,
        logging.WARNING: yellow + format_str + reset,
        logging.ERROR: red + format_str + reset,
        logging.CRITICAL: bold_red + format_str + reset
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt, datefmt='%Y-%m-%d %H:%M:%S')
        return formatter.format(record)


class LoggingService:
    """日志服务管理器"""

    def __init__(self, logger_name='ytdlp_subtitles', log_file=None, level='INFO'):
        """初始化日志服务

        Args:
            logger_name: logger名称，默认是包的根logger
            log_file: 日志文件路径，None 表示只输出到控制台
            level: 日志级别名称或数值
        """
        self.logger_name = logger_name
        self.log_file = log_file
        self.level = self._resolve_level(level)
        self.logger = None
        self._setup_logger()

    @staticmethod
    def _resolve_level(level):
        if isinstance(level, int):
            return level
        return getattr(logging, str(level or 'INFO').upper(), logging.INFO)

    def _setup_logger(self):
        """设置logger"""
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(self.level)
        self.logger.propagate = False

        # 先移除所有已存在的处理器，避免重复输出
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.level)
        console_handler.setFormatter(ColoredFormatter())
        self.logger.addHandler(console_handler)

        if self.log_file:
            file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
            file_handler.setLevel(logging.INFO)  # 文件只记录INFO及以上级别
            file_handler.setFormatter(
                logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            )
            self.logger.addHandler(file_handler)

    def get_logger(self):
        """获取配置好的logger"""
        return self.logger

    def set_level(self, level):
        """设置日志级别

        Args:
            level: 日志级别 (logging.DEBUG, 'INFO', etc.)
        """
        self.level = self._resolve_level(level)
        self.logger.setLevel(self.level)
        for handler in self.logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(self.level)
