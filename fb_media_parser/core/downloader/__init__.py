# -*- coding: utf-8 -*-
"""媒体流式转发模块。"""
from .relay import StreamingRelay, build_content_disposition, map_upstream_headers

__all__ = [
    'StreamingRelay',
    'build_content_disposition',
    'map_upstream_headers'
]
