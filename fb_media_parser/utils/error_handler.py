# -*- coding: utf-8 -*-
"""错误处理工具。"""
import functools
import logging
from typing import Callable

from ..core.exceptions import (
    VideoParserError,
    ParseError,
    NetworkError
)

logger = logging.getLogger(__name__)


def handle_parse_errors(func: Callable) -> Callable:
    """解析错误处理装饰器。
    
    自动捕获意外异常并转换为 ParseError，已知的解析器异常原样抛出。
    
    Args:
        func: 要装饰的协程函数
    
    Returns:
        装饰后的函数
    """
    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except VideoParserError:
            raise
        except Exception as e:
            logger.exception(f"{func.__name__}执行失败: {e}")
            raise ParseError(
                f"解析失败：{str(e)}",
                original_error=e
            )

    return async_wrapper


def normalize_error_message(error: Exception) -> str:
    """规范化错误消息。
    
    Args:
        error: 异常对象
    
    Returns:
        规范化后的错误消息
    """
    if isinstance(error, NetworkError) and error.status_code:
        return f"{error.message} (HTTP {error.status_code})"

    if isinstance(error, VideoParserError):
        error_msg = error.message
    else:
        error_msg = str(error)

    if error_msg.startswith("解析失败："):
        return error_msg.replace("解析失败：", "", 1)
    
    return error_msg or "未知错误"


def format_parse_error(url: str, error: Exception) -> str:
    """格式化解析错误消息。
    
    Args:
        url: 解析失败的URL
        error: 异常对象
    
    Returns:
        格式化后的错误消息
    """
    failure_reason = normalize_error_message(error)
    return f"解析失败：{failure_reason}\n原始链接：{url}"
