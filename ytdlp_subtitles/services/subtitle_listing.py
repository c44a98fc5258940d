"""Parsing of the `yt-dlp --list-subs` report into a clean track catalog.

yt-dlp prints a free-text report: extractor banners and debug chatter, then
one table per section ("Available automatic captions for ..." and
"Available subtitles for ..."). Auto-translated captions are dropped and,
when a video only has auto-generated captions, the list is collapsed to the
tracks in the video's own (original) language.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

logger = logging.getLogger(__name__)

NO_SUBTITLES_MESSAGE = 'No subtitles available'

SECTION_NONE = 'none'
SECTION_AUTO = 'auto'
SECTION_MANUAL = 'manual'

ORIGINAL_SUFFIX = '-orig'

# 调试输出、版本横幅、代理/插件/配置诊断信息
_NOISE_SUBSTRINGS = (
    'Downloading',
    'Extracting URL',
    'Command-line config',
    'Encodings:',
    'Python ',
    'exe versions:',
    'Optional libraries:',
    'Proxy map:',
    'Request Handlers:',
    'Plugin directories:',
    'Loaded ',
    'PO Token',
    'Decrypted nsig',
    'Sort order',
    'Formats sorted',
)
_BANNER_RE = re.compile(r'^\[[^\]]+\]')
_NO_SUBTITLES_RE = re.compile(r'has no (?:subtitles|automatic captions)')
_TRACK_RE = re.compile(r'^(?P<code>[A-Za-z]{2,3}(?:[-_][A-Za-z0-9]+)*)(?:\s+(?P<rest>.*))?$')
_FORMATS_RE = re.compile(r'(?:^|\s)[a-z0-9]+(?:,\s*[a-z0-9]+)*\s*$')


@dataclass(frozen=True)
class SubtitleTrack:
    language: str
    name: str = ''
    manual: bool = False
    original: bool = False

    @property
    def base_language(self) -> str:
        return base_language(self.language)


@dataclass(frozen=True)
class ListingLine:
    text: str
    track: Optional[SubtitleTrack] = None  # None for headers


@dataclass
class SubtitleListing:
    lines: List[ListingLine] = field(default_factory=list)
    has_manual: bool = False
    has_auto: bool = False
    original_languages: Set[str] = field(default_factory=set)

    @property
    def tracks(self) -> List[SubtitleTrack]:
        return [line.track for line in self.lines if line.track is not None]

    def language_codes(self) -> List[str]:
        """按出现顺序返回去重后的语言代码"""
        codes = []
        for track in self.tracks:
            if track.language not in codes:
                codes.append(track.language)
        return codes

    def render(self) -> str:
        texts = [line.text for line in self.lines]
        if not self.tracks:
            texts.append(NO_SUBTITLES_MESSAGE)
        return '\n'.join(texts)


def base_language(code: str) -> str:
    """去掉 '-orig' 后缀"""
    if code.lower().endswith(ORIGINAL_SUFFIX):
        return code[:-len(ORIGINAL_SUFFIX)]
    return code


def _section_header(line: str) -> Optional[str]:
    if 'Available automatic captions' in line:
        return SECTION_AUTO
    if 'Available subtitles' in line:
        return SECTION_MANUAL
    return None


def _is_column_header(line: str) -> bool:
    return line.startswith('Language') and 'Formats' in line


def _is_noise(line: str) -> bool:
    if _BANNER_RE.match(line):
        return True
    return any(marker in line for marker in _NOISE_SUBSTRINGS)


def parse_track(line: str, section: str) -> Optional[SubtitleTrack]:
    """把表格中的一行解析为字幕轨道，无法识别时返回 None"""
    match = _TRACK_RE.match(line.strip())
    if not match:
        return None

    code = match.group('code')
    rest = match.group('rest') or ''
    formats = _FORMATS_RE.search(rest)
    name = (rest[:formats.start()] if formats else rest).strip()

    if section != SECTION_AUTO:
        return SubtitleTrack(language=code, name=name, manual=section == SECTION_MANUAL)

    original = (
        code.lower().endswith(ORIGINAL_SUFFIX)
        or 'Original' in name
        or (not name and len(code) <= 3)
    )
    return SubtitleTrack(language=code, name=name, manual=False, original=original)


def _scan_line(line: str, state: str, originals: Set[str]) -> Tuple[str, Set[str], Optional[ListingLine]]:
    """状态机的一步：返回 (新状态, 原始语言集合, 保留的行或 None)"""
    stripped = line.strip()
    if not stripped:
        return state, originals, None

    section = _section_header(stripped)
    if section is not None:
        return section, originals, ListingLine(stripped)

    if _is_column_header(stripped):
        return state, originals, ListingLine(stripped)

    if _is_noise(stripped) or _NO_SUBTITLES_RE.search(stripped):
        return state, originals, None

    if state == SECTION_NONE:
        return state, originals, ListingLine(stripped)

    # 自动翻译的字幕，例如 "de-en German from English"
    if ' from ' in stripped:
        return state, originals, None

    track = parse_track(stripped, state)
    if track is not None and track.original:
        originals = originals | {track.base_language}
    return state, originals, ListingLine(stripped, track)


def parse_listing(raw_output: str) -> SubtitleListing:
    """解析 yt-dlp --list-subs 的输出

    Args:
        raw_output: yt-dlp 的标准输出

    Returns:
        SubtitleListing: 过滤后的行和推断出的原始语言
    """
    state = SECTION_NONE
    originals: Set[str] = set()
    listing = SubtitleListing()

    for line in raw_output.splitlines():
        state, originals, kept = _scan_line(line, state, originals)
        if state == SECTION_AUTO:
            listing.has_auto = True
        elif state == SECTION_MANUAL:
            listing.has_manual = True
        if kept is not None:
            listing.lines.append(kept)

    listing.original_languages = originals

    if listing.has_auto and not listing.has_manual and originals:
        before = len(listing.tracks)
        listing.lines = [
            line for line in listing.lines
            if line.track is None or line.track.base_language in originals
        ]
        logger.debug(
            f"仅有自动字幕，按原始语言 {sorted(originals)} 过滤: {before} -> {len(listing.tracks)} 条"
        )

    return listing


def normalize_listing(raw_output: str) -> str:
    """把 yt-dlp 的字幕列表输出整理为干净的文本报告"""
    return parse_listing(raw_output).render()
