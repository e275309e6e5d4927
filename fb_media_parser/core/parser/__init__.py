# -*- coding: utf-8 -*-
"""解析模块。"""
from .extractor import extract_video_urls
from .fetcher import PageFetcher
from .url_normalizer import normalize, extract_video_id
from .platform import FacebookParser, BaseVideoParser

__all__ = [
    'extract_video_urls',
    'PageFetcher',
    'normalize',
    'extract_video_id',
    'FacebookParser',
    'BaseVideoParser'
]
