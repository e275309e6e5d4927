# -*- coding: utf-8 -*-
"""工具模块。"""
from .error_handler import (
    handle_parse_errors,
    normalize_error_message,
    format_parse_error
)

__all__ = [
    'handle_parse_errors',
    'normalize_error_message',
    'format_parse_error'
]
