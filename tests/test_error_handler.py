# -*- coding: utf-8 -*-
import pytest

from fb_media_parser.core.exceptions import NetworkError, ParseError, VideoParserError
from fb_media_parser.utils import (
    format_parse_error,
    handle_parse_errors,
    normalize_error_message,
)


def test_normalize_error_message():
    assert normalize_error_message(ParseError("解析失败：boom")) == "boom"
    assert normalize_error_message(NetworkError("请求失败", status_code=503)) == "请求失败 (HTTP 503)"
    assert normalize_error_message(ValueError("bad")) == "bad"
    assert normalize_error_message(ValueError()) == "未知错误"


def test_format_parse_error():
    message = format_parse_error("https://fb.watch/x/", ParseError("解析失败：boom"))
    assert message == "解析失败：boom\n原始链接：https://fb.watch/x/"


async def test_handle_parse_errors_wraps_unexpected():
    @handle_parse_errors
    async def broken():
        raise KeyError("k")

    with pytest.raises(ParseError) as exc_info:
        await broken()
    assert isinstance(exc_info.value.original_error, KeyError)
    assert exc_info.value.error_code == "PARSE_ERROR"


async def test_handle_parse_errors_passes_known_errors():
    error = NetworkError("down")

    @handle_parse_errors
    async def failing():
        raise error

    with pytest.raises(VideoParserError) as exc_info:
        await failing()
    assert exc_info.value is error
