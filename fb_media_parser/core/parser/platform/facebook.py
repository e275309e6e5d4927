# -*- coding: utf-8 -*-
import html as html_lib
import logging
import re
from typing import Optional, Dict, Any, List, Callable, Awaitable
from urllib.parse import quote, urlparse, urlunparse

from .base import BaseVideoParser
from ..extractor import extract_video_urls
from ..url_normalizer import normalize, build_watch_url, CANONICAL_HOST, MOBILE_HOST
from ...config_manager import ConfigManager
from ...exceptions import NetworkError
from ...models import PageAddress, ResolutionResult
from ....utils.error_handler import handle_parse_errors

logger = logging.getLogger(__name__)


FACEBOOK_URL_PATTERN = re.compile(
    r'^https?://(www\.|m\.)?(facebook\.com|fb\.watch)(?=[/:?#]|$)',
    re.IGNORECASE
)
LINK_PATTERN = re.compile(
    r'https?://(?:(?:www|m)\.)?(?:facebook\.com|fb\.watch)/[^\s<>"\'()]*',
    re.IGNORECASE
)
TITLE_SUFFIX_PATTERN = re.compile(r'\s*\|\s*Facebook\s*$')
EMBED_URL = "https://www.facebook.com/plugins/video.php?href={href}"
DEFAULT_TITLE = "Facebook Video"
EXHAUSTED_REASON = (
    "Unable to extract video. The video might be private, deleted, "
    "or require login."
)


def format_duration(seconds: Any) -> str:
    """将秒数格式化为 M:SS 或 H:MM:SS。

    Args:
        seconds: 秒数（整数或以数字开头的字符串）

    Returns:
        格式化后的时长，缺失或无法解析时返回 "0:00"
    """
    if seconds is None or isinstance(seconds, bool):
        return "0:00"
    if isinstance(seconds, (int, float)):
        num = int(seconds)
    else:
        match = re.match(r'\s*(\d+)', str(seconds))
        if not match:
            return "0:00"
        num = int(match.group(1))
    if num <= 0:
        return "0:00"

    hours = num // 3600
    minutes = (num % 3600) // 60
    secs = num % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _meta_content(html: str, key: str) -> Optional[str]:
    """读取 <meta property/name="key" content="..."> 的内容，属性顺序不限。"""
    for tag in re.finditer(r'<meta\b[^>]*>', html, re.I):
        text = tag.group(0)
        name = re.search(r'\b(?:property|name)\s*=\s*["\']([^"\']+)["\']', text, re.I)
        if not name or name.group(1).lower() != key:
            continue
        content = re.search(r'\bcontent\s*=\s*(?:"([^"]*)"|\'([^\']*)\')', text, re.I)
        if content:
            value = content.group(1) if content.group(1) is not None else content.group(2)
            value = html_lib.unescape(value).strip()
            if value:
                return value
    return None


def extract_page_metadata(html: str) -> Dict[str, Optional[str]]:
    """提取页面标题、封面和时长。

    Args:
        html: 页面源码

    Returns:
        包含 title、thumbnail、duration 的字典
    """
    if not html:
        return {'title': DEFAULT_TITLE, 'thumbnail': None, 'duration': "0:00"}

    title = None
    title_match = re.search(r'<title[^>]*>(.*?)</title>', html, re.I | re.S)
    if title_match:
        title = html_lib.unescape(title_match.group(1)).strip()
    title = title or _meta_content(html, 'og:title') or _meta_content(html, 'og:description')
    title = TITLE_SUFFIX_PATTERN.sub('', title or '').strip() or DEFAULT_TITLE

    thumbnail = _meta_content(html, 'og:image') or _meta_content(html, 'twitter:image')
    duration = format_duration(_meta_content(html, 'video:duration'))
    return {'title': title, 'thumbnail': thumbnail, 'duration': duration}


def to_mobile_url(url: str) -> str:
    """把规范链接的主机替换为 m.facebook.com。"""
    parsed = urlparse(url)
    host = (parsed.hostname or '').lower()
    if host in (CANONICAL_HOST, 'facebook.com'):
        return urlunparse(parsed._replace(netloc=MOBILE_HOST))
    return url


def build_embed_url(video_id: str) -> str:
    return EMBED_URL.format(href=quote(build_watch_url(video_id), safe="-_.!~*'()"))


class FacebookParser(BaseVideoParser):
    """Facebook 视频解析器。

    依次尝试直接页面、移动端页面和嵌入播放器页面，任一方式提取到直链即返回。
    """

    def __init__(
        self,
        fetcher,
        config_manager: Optional[ConfigManager] = None
    ):
        """初始化 Facebook 解析器。

        Args:
            fetcher: 页面拉取器，需提供 async fetch(url, headers) -> str
            config_manager: 配置管理器（可选）
        """
        super().__init__("facebook")
        self.fetcher = fetcher
        self.config_manager = config_manager or ConfigManager()
        self.strategies: List[tuple] = [
            ('direct', self._extract_from_direct_page),
            ('mobile', self._extract_from_mobile_page),
            ('embedded', self._extract_from_embedded),
        ]

    def can_parse(self, url: str) -> bool:
        if not url or not isinstance(url, str):
            return False
        return bool(FACEBOOK_URL_PATTERN.match(url.strip()))

    def extract_links(self, text: str) -> List[str]:
        """从文本中提取 Facebook 链接（去重并保持顺序）。

        Args:
            text: 输入文本

        Returns:
            Facebook 链接列表
        """
        if not text:
            return []
        seen = set()
        result = []
        for match in LINK_PATTERN.finditer(text):
            link = match.group(0).rstrip('.,;!?')
            if link not in seen:
                seen.add(link)
                result.append(link)
        return result

    @handle_parse_errors
    async def parse(self, url: str) -> ResolutionResult:
        """解析 Facebook 视频链接。

        Args:
            url: 视频链接

        Returns:
            解析结果
        """
        logger.info(f"[{self.name}] 开始解析: {url}")
        address = normalize(url)
        logger.info(f"[{self.name}] 规范化链接: {address.url}")

        for name, strategy in self.strategies:
            result = await self._run_strategy(name, strategy, address)
            if result is not None:
                logger.info(
                    f"[{self.name}] {name} 方式解析成功，"
                    f"找到 {len(result.candidates)} 个直链: {result.title}"
                )
                return result

        logger.warning(f"[{self.name}] 所有解析方式均失败: {url}")
        return ResolutionResult.failure(EXHAUSTED_REASON)

    async def _run_strategy(
        self,
        name: str,
        strategy: Callable[[PageAddress], Awaitable[Optional[ResolutionResult]]],
        address: PageAddress
    ) -> Optional[ResolutionResult]:
        logger.debug(f"[{self.name}] 尝试 {name} 方式")
        try:
            result = await strategy(address)
        except NetworkError as e:
            logger.warning(f"[{self.name}] {name} 方式请求失败: {e.message}")
            return None
        if result is None or not result.candidates:
            logger.debug(f"[{self.name}] {name} 方式未找到直链")
            return None
        result.strategy = name
        return result

    def _build_result(self, html: str) -> Optional[ResolutionResult]:
        candidates = extract_video_urls(html)
        if not candidates:
            return None
        metadata = extract_page_metadata(html)
        return ResolutionResult(
            success=True,
            title=metadata['title'],
            thumbnail_url=metadata['thumbnail'],
            duration_label=metadata['duration'],
            candidates=candidates
        )

    async def _extract_from_direct_page(self, address: PageAddress) -> Optional[ResolutionResult]:
        html = await self.fetcher.fetch(address.url, self.config_manager.page_headers)
        return self._build_result(html)

    async def _extract_from_mobile_page(self, address: PageAddress) -> Optional[ResolutionResult]:
        html = await self.fetcher.fetch(
            to_mobile_url(address.url),
            self.config_manager.get_mobile_headers()
        )
        return self._build_result(html)

    async def _extract_from_embedded(self, address: PageAddress) -> Optional[ResolutionResult]:
        """无视频ID时直接跳过，不发起请求。"""
        if not address.video_id:
            logger.debug(f"[{self.name}] 未提取到视频ID，跳过 embedded 方式")
            return None
        html = await self.fetcher.fetch(
            build_embed_url(address.video_id),
            self.config_manager.page_headers
        )
        return self._build_result(html)
