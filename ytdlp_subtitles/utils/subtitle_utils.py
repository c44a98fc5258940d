"""Helpers for turning SRT/WebVTT subtitle files into plain text."""

import re

# 00:00:01.000 --> 00:00:03.000 position:50% line:0 (SRT uses comma decimals)
_TIMECODE = r'(?:\d{2,}:)?\d{2}:\d{2}[.,]\d{3}'
_CUE_SETTING = r'(?:position|line|align|size|vertical|region):\S+'
_TIMESTAMP_LINE_RE = re.compile(
    rf'^{_TIMECODE}\s*-->\s*{_TIMECODE}(?:\s+{_CUE_SETTING})*$'
)
_TAG_RE = re.compile(r'<[^>]*>')
_INDEX_RE = re.compile(r'^\d+$')


def split_lines(content):
    """按 CRLF / LF / CR 拆分为物理行"""
    return content.replace('\r\n', '\n').replace('\r', '\n').split('\n')


def _is_discarded(line):
    if not line:
        return True
    if line == 'WEBVTT' or line.startswith(('WEBVTT ', 'Kind:', 'Language:')):
        return True
    if _INDEX_RE.match(line):
        return True
    return bool(_TIMESTAMP_LINE_RE.match(line))


def remove_timestamps(content):
    """去掉字幕中的序号、时间轴、WebVTT头和标签，只保留字幕文本

    Args:
        content: SRT 或 WebVTT 文件内容

    Returns:
        str: 每行一句的纯文本
    """
    result = []
    for raw_line in split_lines(content):
        line = raw_line.strip()
        if _is_discarded(line):
            continue

        # 清理标签后再检查一次，保证重复调用结果不变
        cleaned = _TAG_RE.sub('', line).strip()
        if _is_discarded(cleaned):
            continue
        result.append(cleaned)

    return '\n'.join(result).strip()


def subtitle_language_from_filename(filename):
    """从 yt-dlp 输出的 '<标题>.<语言>.<扩展名>' 文件名中取出语言代码"""
    parts = filename.rsplit('.', 2)
    if len(parts) < 3 or not parts[1]:
        return None
    return parts[1]
