# -*- coding: utf-8 -*-
from typing import Dict, List, Optional, Tuple

import pytest

from fb_media_parser.core.exceptions import NetworkError


HD_URL = "https://video.xx.fbcdn.net/v/t42/hd_clip.mp4?oh=abc"
SD_URL = "https://video.xx.fbcdn.net/v/t42/clip_480.mp4?oh=def"


def escaped(url: str) -> str:
    """模拟页面 JSON 中的转义形式。"""
    return url.replace('/', '\\/').replace('&', '\\u0026')


def video_page(*fields: Tuple[str, str], title: str = "Cat video | Facebook") -> str:
    body = ",".join(f'"{key}":"{escaped(value)}"' for key, value in fields)
    return (
        "<html><head>"
        f"<title>{title}</title>"
        '<meta property="og:image" content="https://scontent.xx.fbcdn.net/thumb.jpg">'
        '<meta property="video:duration" content="65">'
        "</head><body><script>{" + body + "}</script></body></html>"
    )


class FakeFetcher:
    """按 URL 子串返回预设页面的页面拉取器，记录所有调用。"""

    def __init__(self, pages: Optional[Dict[str, object]] = None):
        self.pages = pages or {}
        self.calls: List[Tuple[str, Dict[str, str]]] = []

    async def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> str:
        self.calls.append((url, headers or {}))
        for needle, page in self.pages.items():
            if needle in url:
                if isinstance(page, Exception):
                    raise page
                return page
        raise NetworkError("无法获取页面内容，状态码: 404", url=url, status_code=404)

    @property
    def urls(self) -> List[str]:
        return [url for url, _ in self.calls]


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()
