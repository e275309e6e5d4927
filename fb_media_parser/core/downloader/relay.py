# -*- coding: utf-8 -*-
import asyncio
import logging
import re
from typing import Dict, Optional
from urllib.parse import quote

import aiohttp
from aiohttp import web

from ..config_manager import ConfigManager
from ..constants import Config
from ..exceptions import NetworkError
from ..models import RelayRequest

logger = logging.getLogger(__name__)


UPSTREAM_FAILED_MESSAGE = "Failed to download video. The link might be expired or invalid."
STREAM_ERROR_MESSAGE = "Download stream error"

_UNSAFE_FILENAME_CHARS = re.compile(r'["\\\r\n\x00-\x1f\x7f]')


def build_content_disposition(filename: Optional[str]) -> str:
    """构造 attachment 形式的 Content-Disposition。

    Args:
        filename: 建议的文件名

    Returns:
        Content-Disposition 头的值，非 ASCII 文件名额外附带 filename* 形式
    """
    name = _UNSAFE_FILENAME_CHARS.sub('', filename or '').strip() or Config.DEFAULT_FILENAME
    try:
        name.encode('ascii')
    except UnicodeEncodeError:
        fallback = name.encode('ascii', 'ignore').decode('ascii').strip() or Config.DEFAULT_FILENAME
        return (
            f'attachment; filename="{fallback}"; '
            f"filename*=UTF-8''{quote(name, safe='')}"
        )
    return f'attachment; filename="{name}"'


def map_upstream_headers(upstream_headers, filename: Optional[str]) -> Dict[str, str]:
    """把上游响应头映射为下行响应头。

    Args:
        upstream_headers: 上游响应头
        filename: 建议的文件名

    Returns:
        下行响应头字典
    """
    headers = {
        'Content-Type': upstream_headers.get('Content-Type') or Config.DEFAULT_CONTENT_TYPE,
        'Content-Disposition': build_content_disposition(filename),
    }
    for name in ('Content-Length', 'Accept-Ranges', 'Content-Range'):
        value = upstream_headers.get(name)
        if value:
            headers[name] = value
    return headers


class StreamingRelay:
    """把上游媒体流式转发给客户端。"""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        config_manager: Optional[ConfigManager] = None
    ):
        """初始化流式转发器。

        Args:
            session: aiohttp会话
            config_manager: 配置管理器（可选）
        """
        self.session = session
        self.config_manager = config_manager or ConfigManager()

    def _build_upstream_headers(self, range_header: Optional[str]) -> Dict[str, str]:
        headers = dict(self.config_manager.media_headers)
        if range_header:
            headers['Range'] = range_header
        return headers

    async def relay(
        self,
        request: web.Request,
        relay_request: RelayRequest
    ) -> web.StreamResponse:
        """转发媒体流。

        上游在开始传输前失败时返回 500；传输开始后出错则直接结束连接。

        Args:
            request: 客户端请求
            relay_request: 转发参数

        Returns:
            流式响应或 JSON 错误响应
        """
        if not relay_request.media_url:
            return web.json_response(
                {'error': 'URL parameter is required'},
                status=400
            )

        logger.info(f"开始转发: {relay_request.media_url[:120]}")
        timeout = aiohttp.ClientTimeout(total=self.config_manager.relay_timeout)
        try:
            async with self.session.get(
                relay_request.media_url,
                headers=self._build_upstream_headers(relay_request.range_header),
                timeout=timeout,
                max_redirects=self.config_manager.max_redirects
            ) as upstream:
                if not 200 <= upstream.status < 300:
                    raise NetworkError(
                        f"上游响应异常，状态码: {upstream.status}",
                        url=relay_request.media_url,
                        status_code=upstream.status
                    )
                return await self._pipe(request, upstream, relay_request)
        except ConnectionResetError:
            raise
        except NetworkError as e:
            logger.error(f"转发失败: {e.message}")
        except asyncio.TimeoutError:
            logger.error(f"转发超时: {relay_request.media_url[:120]}")
        except aiohttp.ClientError as e:
            logger.error(f"转发请求失败: {e}")
        return web.json_response({'error': UPSTREAM_FAILED_MESSAGE}, status=500)

    async def _pipe(
        self,
        request: web.Request,
        upstream: aiohttp.ClientResponse,
        relay_request: RelayRequest
    ) -> web.StreamResponse:
        headers = map_upstream_headers(upstream.headers, relay_request.filename)
        status = 206 if 'Content-Range' in headers else 200
        response = web.StreamResponse(status=status, headers=headers)
        try:
            await response.prepare(request)
            async for chunk in upstream.content.iter_chunked(self.config_manager.stream_chunk_size):
                await response.write(chunk)
            await response.write_eof()
        except ConnectionResetError:
            logger.debug(f"客户端已断开: {relay_request.media_url[:120]}")
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"转发流中断: {relay_request.media_url[:120]}, 错误: {e!r}")
            if not response.prepared:
                return web.json_response({'error': STREAM_ERROR_MESSAGE}, status=500)
            # 响应头已发出，只能中断连接
            raise ConnectionResetError("上游传输中断") from e

        logger.debug(f"转发完成: {relay_request.media_url[:120]}")
        return response
