# -*- coding: utf-8 -*-
"""Facebook 链接规范化。"""
import logging
import re
from typing import Optional

from ..models import PageAddress

logger = logging.getLogger(__name__)


CANONICAL_HOST = "www.facebook.com"
MOBILE_HOST = "m.facebook.com"
SHORT_HOST = "fb.watch"

# 按顺序匹配，返回第一个命中的捕获组
VIDEO_ID_PATTERNS = [
    re.compile(r'facebook\.com/.*/videos/(\d+)'),
    re.compile(r'fb\.watch/([a-zA-Z0-9_-]+)'),
    re.compile(r'facebook\.com/watch/?\?v=(\d+)'),
    re.compile(r'facebook\.com/.*/posts/(\d+)'),
    re.compile(r'facebook\.com/video\.php\?v=(\d+)'),
    re.compile(r'facebook\.com/.*/videos/vb\.\d+/(\d+)'),
    re.compile(r'facebook\.com/reel/(\d+)'),
]


def extract_video_id(url: str) -> Optional[str]:
    """从 URL 中提取视频ID。

    Args:
        url: Facebook 链接

    Returns:
        视频ID，无法提取时返回None
    """
    if not url:
        return None
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def build_watch_url(video_id: str) -> str:
    return f"https://{CANONICAL_HOST}/watch/?v={video_id}"


def normalize_url(url: str) -> str:
    """将各种形式的 Facebook 链接转换为规范链接。

    处理 fb.watch 短链、m.facebook.com 移动端链接以及 /reel/ 短视频链接，
    其他链接原样返回。内部出错时同样原样返回，不抛出异常。

    Args:
        url: 原始链接

    Returns:
        规范化后的链接
    """
    try:
        if SHORT_HOST in url:
            video_id = extract_video_id(url)
            if video_id:
                return build_watch_url(video_id)

        if MOBILE_HOST in url:
            return url.replace(MOBILE_HOST, CANONICAL_HOST, 1)

        if '/reel/' in url:
            video_id = extract_video_id(url)
            if video_id:
                return build_watch_url(video_id)

        return url
    except Exception as e:
        logger.warning(f"链接规范化失败，使用原始链接: {url!r}, 错误: {e}")
        return url


def normalize(url: str) -> PageAddress:
    """规范化链接并提取视频ID。

    视频ID优先从原始链接提取，提取不到时再从规范链接提取。

    Args:
        url: 原始链接

    Returns:
        PageAddress 实例
    """
    canonical = normalize_url(url)
    try:
        video_id = extract_video_id(url) or extract_video_id(canonical)
    except Exception as e:
        logger.warning(f"视频ID提取失败: {url!r}, 错误: {e}")
        video_id = None
    logger.debug(f"规范化链接: {url} -> {canonical}, video_id={video_id}")
    return PageAddress(url=canonical, video_id=video_id)
