"""File utility functions."""

import logging
import os
import re

import chardet

from ..config.config_manager import get_config_value

logger = logging.getLogger(__name__)

# Windows 非法字符和控制字符
_ILLEGAL_CHARS_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def detect_file_encoding(raw_bytes):
    """使用多种方法检测文件编码"""
    if not raw_bytes:
        return 'utf-8'

    # 带BOM的UTF-8直接识别，避免chardet误判
    if raw_bytes.startswith(b'\xef\xbb\xbf'):
        return 'utf-8-sig'

    # 尝试使用chardet检测
    result = chardet.detect(raw_bytes)
    if result['encoding'] and result['confidence'] > 0.7:
        return result['encoding']

    # 尝试常见编码
    for encoding in ('utf-8', 'gbk', 'utf-16'):
        try:
            raw_bytes.decode(encoding)
            return encoding
        except UnicodeDecodeError:
            continue

    return 'utf-8'  # 默认使用UTF-8


def read_text_file(file_path):
    """按检测到的编码读取文本文件"""
    with open(file_path, 'rb') as f:
        raw_bytes = f.read()
    encoding = detect_file_encoding(raw_bytes)
    logger.debug(f"读取文件 {file_path}，编码: {encoding}")
    try:
        return raw_bytes.decode(encoding, errors='replace')
    except LookupError:
        logger.warning(f"未知编码 {encoding}，改用UTF-8读取: {file_path}")
        return raw_bytes.decode('utf-8', errors='replace')


def sanitize_filename(filename, max_length=None, replace_char=None,
                      truncate_suffix=None, reserved_names=None):
    """清理文件名，移除不安全字符、规避保留名并限制长度

    Args:
        filename: 原始文件名
        max_length: 最大长度（含扩展名），默认取 file.max_filename_length
        replace_char: 非法字符的替换字符
        truncate_suffix: 截断时追加的后缀
        reserved_names: Windows 保留设备名列表

    Returns:
        str: 安全的文件名
    """
    if max_length is None:
        max_length = get_config_value('file.max_filename_length', 50)
    if replace_char is None:
        replace_char = get_config_value('file.sanitize.replace_char', '_')
    if truncate_suffix is None:
        truncate_suffix = get_config_value('file.sanitize.truncate_suffix', '...')
    if reserved_names is None:
        reserved_names = get_config_value('file.sanitize.reserved_names', [])

    clean_name = _ILLEGAL_CHARS_RE.sub(replace_char, filename)
    clean_name = re.sub(r'\s+', ' ', clean_name).strip()
    if not clean_name:
        clean_name = 'unnamed_file'

    name, ext = os.path.splitext(clean_name)
    if name.upper() in {reserved.upper() for reserved in reserved_names}:
        clean_name = f"_{clean_name}"
        name = f"_{name}"

    if len(clean_name) > max_length:
        keep = max(max_length - len(ext) - len(truncate_suffix), 1)
        clean_name = f"{name[:keep]}{truncate_suffix}{ext}"

    return clean_name
