# -*- coding: utf-8 -*-
"""从页面源码中提取 Facebook 视频直链。

提取规则按声明顺序依次匹配，每条规则带有默认质量标签。匹配到的链接经过
转义清理、合法性校验和去重后，按质量档位从高到低排序。质量与大小均为
经验估计，不会请求媒体本身。
"""
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Set
from urllib.parse import urlparse, unquote

from ..models import MediaCandidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionRule:
    """一条提取规则。"""
    name: str
    pattern: re.Pattern
    default_quality: str
    generic_src: bool = False


def _json_field(key: str, value: str = r'[^"]+') -> re.Pattern:
    return re.compile(rf'"{key}":"({value})"')


EXTRACTION_RULES = [
    # 高清
    ExtractionRule('hd_src', _json_field('hd_src'), 'HD (1080p)'),
    ExtractionRule('hd_src_no_ratelimit', _json_field('hd_src_no_ratelimit'), 'HD (1080p)'),
    ExtractionRule('browser_native_hd_url', _json_field('browser_native_hd_url'), 'HD (720p)'),
    # 标清
    ExtractionRule('sd_src', _json_field('sd_src'), 'SD (480p)'),
    ExtractionRule('sd_src_no_ratelimit', _json_field('sd_src_no_ratelimit'), 'SD (480p)'),
    ExtractionRule('browser_native_sd_url', _json_field('browser_native_sd_url'), 'SD (360p)'),
    # 通用
    ExtractionRule('playable_url', _json_field('playable_url'), 'Standard'),
    ExtractionRule('playable_url_quality_hd', _json_field('playable_url_quality_hd'), 'HD (720p)'),
    ExtractionRule('video_url', _json_field('video_url'), 'Standard'),
    ExtractionRule('src', _json_field('src', r'[^"]*\.mp4[^"]*'), 'Mobile', generic_src=True),
    # 其他
    ExtractionRule('dash_manifest', _json_field('dash_manifest'), 'Standard'),
    ExtractionRule('progressive_url', _json_field('progressive_url'), 'Standard'),
]

VIDEO_OBJECT_PATTERN = re.compile(r'\{"video_id":"[^"]+","video_url":"([^"]+)"')

VALID_MEDIA_HOSTS = [
    'video.xx.fbcdn.net',
    'scontent.xx.fbcdn.net',
    'video.fxx',
    'scontent-',
    'fbcdn.net',
]

VIDEO_INDICATORS = ['.mp4', 'video', 'type=video']

QUALITY_ORDER = {'HD': 3, 'SD': 2, 'Mobile': 1, 'Standard': 0}

SIZE_BY_TIER = {'HD': '~50MB', 'SD': '~25MB', 'Mobile': '~15MB'}
DEFAULT_SIZE = '~30MB'

_MALFORMED_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')


def quality_rank(quality: str) -> int:
    """按质量标签的第一个词返回档位序号，未知标签为0。"""
    tier = quality.split(' ')[0] if quality else ''
    return QUALITY_ORDER.get(tier, 0)


def estimate_size(quality: str) -> str:
    tier = quality.split(' ')[0] if quality else ''
    return SIZE_BY_TIER.get(tier, DEFAULT_SIZE)


def clean_url(raw: str) -> str:
    """还原页面 JSON 中转义过的链接。

    先处理 unicode 转义和反斜杠，再尝试一次百分号解码；
    解码失败时保留转义清理后的结果。

    Args:
        raw: 正则捕获到的原始字符串

    Returns:
        清理后的链接
    """
    url = (
        raw.replace('\\u0025', '%')
        .replace('\\u0026', '&')
        .replace('\\/', '/')
        .replace('\\', '')
    )
    if _MALFORMED_ESCAPE.search(url):
        return url
    try:
        return unquote(url, errors='strict')
    except UnicodeDecodeError:
        return url


def is_valid_video_url(url: str) -> bool:
    """校验链接是否为可用的 Facebook 视频直链。

    Args:
        url: 清理后的链接

    Returns:
        同时命中媒体域名和视频特征且为 http(s) 绝对链接时返回True
    """
    if not url or not isinstance(url, str) or len(url) < 10:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        return False
    has_valid_domain = any(host in url for host in VALID_MEDIA_HOSTS)
    has_video_indicator = any(ind in url for ind in VIDEO_INDICATORS)
    return has_valid_domain and has_video_indicator


def refine_quality(rule: ExtractionRule, url: str) -> str:
    """根据链接本身的特征修正规则的默认质量。

    Args:
        rule: 命中的提取规则
        url: 清理后的链接

    Returns:
        质量标签
    """
    rank = quality_rank(rule.default_quality)
    if 'hd' in url and rank < QUALITY_ORDER['HD']:
        return 'HD (720p)'
    if 'sd' in url and rank <= QUALITY_ORDER['SD']:
        return 'SD (480p)'
    if rule.generic_src:
        return 'Mobile (360p)'
    return rule.default_quality


def _accept(
    raw: str,
    quality_of,
    seen: Set[str],
    candidates: List[MediaCandidate]
) -> Optional[MediaCandidate]:
    url = clean_url(raw)
    if not is_valid_video_url(url) or url in seen:
        return None
    seen.add(url)
    quality = quality_of(url)
    candidate = MediaCandidate(
        quality=quality,
        source_url=url,
        approximate_size=estimate_size(quality)
    )
    candidates.append(candidate)
    return candidate


def extract_video_urls(html: str, rules: List[ExtractionRule] = None) -> List[MediaCandidate]:
    """从页面源码中提取视频直链并排序。

    Args:
        html: 页面源码
        rules: 提取规则表，默认为 EXTRACTION_RULES

    Returns:
        去重后按质量从高到低排序的候选列表，质量相同的保持发现顺序
    """
    if not html:
        return []
    if rules is None:
        rules = EXTRACTION_RULES

    seen: Set[str] = set()
    candidates: List[MediaCandidate] = []

    for rule in rules:
        for match in rule.pattern.finditer(html):
            candidate = _accept(
                match.group(1),
                lambda url, rule=rule: refine_quality(rule, url),
                seen,
                candidates
            )
            if candidate:
                logger.debug(f"规则 {rule.name} 命中: {candidate.quality} {candidate.source_url[:80]}")

    for match in VIDEO_OBJECT_PATTERN.finditer(html):
        _accept(match.group(1), lambda url: 'Standard', seen, candidates)

    candidates.sort(key=lambda c: quality_rank(c.quality), reverse=True)
    logger.debug(f"共提取到 {len(candidates)} 个视频链接")
    return candidates
