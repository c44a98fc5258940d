"""Configuration management for the yt-dlp subtitle service."""

import copy
import logging
import os
import re

import yaml

from ..errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'YTDLP_SUBTITLES_CONFIG'

DEFAULT_CONFIG = {
    'app': {
        'name': 'yt-dlp Subtitle Service',
        'version': '1.0.0',
    },
    'logging': {
        'level': 'INFO',
        'file': None,
    },
    'ytdlp': {
        'executable': 'yt-dlp',
        'timeout': None,
    },
    'download': {
        'default_language': 'en',
        'subtitle_extensions': ['.vtt'],
        'temp_prefix': 'ytdlp-subtitles-',
    },
    'file': {
        'max_filename_length': 50,
        'sanitize': {
            'replace_char': '_',
            'truncate_suffix': '...',
            'reserved_names': [
                'CON', 'PRN', 'AUX', 'NUL', 'COM1', 'COM2', 'COM3', 'COM4',
                'COM5', 'COM6', 'COM7', 'COM8', 'COM9', 'LPT1', 'LPT2',
                'LPT3', 'LPT4', 'LPT5', 'LPT6', 'LPT7', 'LPT8', 'LPT9',
            ],
        },
    },
}

_LANGUAGE_RE = re.compile(r'^[a-z]{2,3}(-[A-Z][a-z]{3})?(-[A-Z]{2})?$', re.IGNORECASE)


def _deep_merge(base, override):
    """把 override 递归合并进 base 的副本"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_overrides():
    """从环境变量读取配置覆盖项"""
    overrides = {}

    def put(key_path, value):
        node = overrides
        keys = key_path.split('.')
        for key in keys[:-1]:
            node = node.setdefault(key, {})
        node[keys[-1]] = value

    env = os.environ
    if env.get('YTDLP_DEFAULT_SUBTITLE_LANG'):
        put('download.default_language', env['YTDLP_DEFAULT_SUBTITLE_LANG'])
    if env.get('YTDLP_EXECUTABLE'):
        put('ytdlp.executable', env['YTDLP_EXECUTABLE'])
    if env.get('YTDLP_TIMEOUT'):
        try:
            put('ytdlp.timeout', float(env['YTDLP_TIMEOUT']))
        except ValueError:
            raise ConfigError(f"YTDLP_TIMEOUT must be a number: {env['YTDLP_TIMEOUT']}")
    if env.get('YTDLP_MAX_FILENAME_LENGTH'):
        try:
            put('file.max_filename_length', int(env['YTDLP_MAX_FILENAME_LENGTH']))
        except ValueError:
            raise ConfigError(
                f"YTDLP_MAX_FILENAME_LENGTH must be an integer: {env['YTDLP_MAX_FILENAME_LENGTH']}"
            )
    if env.get('YTDLP_SANITIZE_REPLACE_CHAR'):
        put('file.sanitize.replace_char', env['YTDLP_SANITIZE_REPLACE_CHAR'])
    if env.get('YTDLP_SANITIZE_TRUNCATE_SUFFIX'):
        put('file.sanitize.truncate_suffix', env['YTDLP_SANITIZE_TRUNCATE_SUFFIX'])
    if env.get('YTDLP_SANITIZE_RESERVED_NAMES'):
        names = [name.strip() for name in env['YTDLP_SANITIZE_RESERVED_NAMES'].split(',')]
        put('file.sanitize.reserved_names', [name for name in names if name])
    if env.get('LOG_LEVEL'):
        put('logging.level', env['LOG_LEVEL'].upper())
    return overrides


def validate_config(config):
    """校验配置，不合法时抛出 ConfigError"""
    max_length = config['file']['max_filename_length']
    if not isinstance(max_length, int) or max_length < 5:
        raise ConfigError('file.max_filename_length must be at least 5')

    language = config['download']['default_language']
    if not isinstance(language, str) or not _LANGUAGE_RE.match(language):
        raise ConfigError(f'Invalid download.default_language: {language!r}')

    extensions = config['download']['subtitle_extensions']
    if not extensions or not all(isinstance(ext, str) and ext.startswith('.') for ext in extensions):
        raise ConfigError('download.subtitle_extensions must be a list like [".vtt"]')

    config['ytdlp']['timeout'] = _validate_timeout(config['ytdlp'].get('timeout'))


def _validate_timeout(timeout):
    """超时必须为空或正数；数字字符串会被转换为 float"""
    if timeout is None:
        return None
    if isinstance(timeout, bool):
        raise ConfigError(f'ytdlp.timeout must be a positive number of seconds: {timeout!r}')
    if isinstance(timeout, str):
        try:
            timeout = float(timeout.strip())
        except ValueError:
            raise ConfigError(f'ytdlp.timeout must be a positive number of seconds: {timeout!r}')
    if not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(f'ytdlp.timeout must be a positive number of seconds: {timeout!r}')
    return timeout


class ConfigManager:
    """Central configuration manager for the application."""

    def __init__(self, config_path=None):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，默认读取环境变量或包内 config.yml
        """
        self.config = {}
        self._setup_config_paths(config_path)
        self.load_config()

    def _setup_config_paths(self, config_path=None):
        """设置配置文件路径"""
        local_config_path = os.path.join(os.path.dirname(__file__), 'config.yml')
        self.config_path = config_path or os.getenv(CONFIG_ENV_VAR) or local_config_path
        logger.info(f"配置文件路径: {self.config_path}")

    def _read_config_file(self):
        """读取 YAML 配置文件，失败时返回空字典"""
        if not os.path.exists(self.config_path):
            logger.warning(f"配置文件不存在，使用默认配置: {self.config_path}")
            return {}

        if not os.access(self.config_path, os.R_OK):
            logger.error(f"配置文件无读取权限: {self.config_path}")
            return {}

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"YAML解析错误: {str(e)}")
            return {}

        if not loaded_config:
            logger.warning("配置文件为空，使用默认配置")
            return {}
        if not isinstance(loaded_config, dict):
            logger.error(f"配置文件格式错误，应为字典，实际为: {type(loaded_config)}")
            return {}
        return loaded_config

    def load_config(self):
        """加载配置：默认值 < YAML 文件 < 环境变量"""
        logger.info(f"尝试加载配置文件: {self.config_path}")
        config = _deep_merge(DEFAULT_CONFIG, self._read_config_file())
        config = _deep_merge(config, _env_overrides())
        validate_config(config)
        self.config = config
        logger.info(f"配置加载成功，包含以下部分: {list(self.config.keys())}")
        logger.debug(f"解析后的配置: {self.config}")

    def get_config_value(self, key_path, default=None):
        """从配置中获取值，支持点号分隔的路径，如 'download.default_language'"""
        value = self.config
        keys = key_path.split('.')
        for i, key in enumerate(keys):
            if not isinstance(value, dict):
                logger.warning(f"配置路径 {'.'.join(keys[:i])} 的值不是字典: {value}")
                return default
            if key not in value:
                logger.debug(f"配置路径 {'.'.join(keys[:i+1])} 不存在，使用默认值: {default}")
                return default
            value = value[key]
        return value

    def reload_config(self):
        """重新加载配置文件"""
        self.load_config()


# 全局配置管理器实例
_config_manager = None


def get_config_manager():
    """获取全局配置管理器实例"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def set_config_manager(config_manager):
    """替换全局配置管理器（create_app 指定配置文件时使用）"""
    global _config_manager
    _config_manager = config_manager
    return config_manager


def get_config_value(key_path, default=None):
    """便捷函数：获取配置值"""
    return get_config_manager().get_config_value(key_path, default)


def load_config():
    """便捷函数：重新加载配置"""
    return get_config_manager().reload_config()
