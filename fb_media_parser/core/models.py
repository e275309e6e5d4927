# -*- coding: utf-8 -*-
"""解析结果数据结构。"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List


@dataclass(frozen=True)
class PageAddress:
    """规范化后的页面地址。"""
    url: str
    video_id: Optional[str] = None


@dataclass(frozen=True)
class MediaCandidate:
    """一个可直接拉取的媒体直链及其粗略质量标签。"""
    quality: str
    source_url: str
    approximate_size: str = "~30MB"
    format: str = "MP4"

    def to_dict(self) -> Dict[str, str]:
        return {
            'quality': self.quality,
            'format': self.format,
            'size': self.approximate_size,
            'url': self.source_url
        }


@dataclass
class ResolutionResult:
    """单次解析请求的结果。

    success 为 True 时 candidates 非空，否则 error 给出失败原因。
    """
    success: bool
    title: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration_label: Optional[str] = None
    candidates: List[MediaCandidate] = field(default_factory=list)
    error: Optional[str] = None
    strategy: Optional[str] = None

    @classmethod
    def failure(cls, reason: str) -> "ResolutionResult":
        return cls(success=False, error=reason)

    def to_dict(self) -> Dict[str, Any]:
        """转换为接口响应格式。

        Returns:
            成功时包含 title/thumbnail/duration/downloadLinks，
            失败时仅包含 error
        """
        if not self.success:
            return {'success': False, 'error': self.error}
        return {
            'success': True,
            'title': self.title,
            'thumbnail': self.thumbnail_url,
            'duration': self.duration_label,
            'downloadLinks': [c.to_dict() for c in self.candidates]
        }


@dataclass(frozen=True)
class RelayRequest:
    """一次流式转发请求。"""
    media_url: str
    filename: str
    range_header: Optional[str] = None
