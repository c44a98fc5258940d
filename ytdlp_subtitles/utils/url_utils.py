"""URL validation helpers."""

import logging
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

_PLATFORM_HOSTS = {
    'youtube': ('youtube.com', 'youtu.be'),
    'bilibili': ('bilibili.com', 'b23.tv'),
    'acfun': ('acfun.cn',),
    'facebook': ('facebook.com', 'fb.watch'),
    'tiktok': ('tiktok.com',),
    'vimeo': ('vimeo.com',),
}


def validate_url(url):
    """检查字符串是否为可交给 yt-dlp 的视频URL"""
    if not isinstance(url, str):
        return False
    url = url.strip()
    if not url or any(ch.isspace() for ch in url):
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.hostname)


def detect_platform(url):
    """检测视频平台，未知平台返回 None"""
    if not validate_url(url):
        return None
    host = (urlparse(url.strip()).hostname or '').lower()
    for platform, domains in _PLATFORM_HOSTS.items():
        if any(host == domain or host.endswith('.' + domain) for domain in domains):
            return platform
    return None
