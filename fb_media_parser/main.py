# -*- coding: utf-8 -*-
import json
import logging
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

import aiohttp
from aiohttp import web

from . import __version__
from .core.config_manager import ConfigManager
from .core.constants import Config
from .core.downloader import StreamingRelay
from .core.exceptions import VideoParserError
from .core.models import RelayRequest
from .core.parser import FacebookParser, PageFetcher, BaseVideoParser

logger = logging.getLogger(__name__)


CONFIG_KEY = web.AppKey("config_manager", ConfigManager)
SESSION_KEY = web.AppKey("client_session", aiohttp.ClientSession)
PARSER_KEY = web.AppKey("parser", BaseVideoParser)
RELAY_KEY = web.AppKey("relay", StreamingRelay)

routes = web.RouteTableDef()


def _error(message: str, status: int) -> web.Response:
    return web.json_response({'success': False, 'error': message}, status=status)


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    """把未匹配路由和未捕获异常转换为 JSON 响应。"""
    try:
        return await handler(request)
    except web.HTTPNotFound:
        return _error('Endpoint not found', 404)
    except (web.HTTPException, ConnectionResetError):
        raise
    except Exception as e:
        logger.exception(f"请求处理失败: {request.method} {request.path}, 错误: {e}")
        return _error('Something went wrong!', 500)


@routes.post('/api/video-details')
async def video_details(request: web.Request) -> web.Response:
    """解析 Facebook 视频链接，返回标题、封面、时长和直链列表。"""
    raw_body = await request.text()
    try:
        body = json.loads(raw_body) if raw_body.strip() else {}
    except ValueError:
        return _error('Invalid JSON body', 400)

    video_url = body.get('videoUrl') if isinstance(body, dict) else None
    if not isinstance(video_url, str) or not video_url.strip():
        return _error('Video URL is required', 400)
    video_url = video_url.strip()

    parser = request.app[PARSER_KEY]
    if not parser.can_parse(video_url):
        return _error('Please provide a valid Facebook video URL', 400)

    logger.info(f"收到解析请求: {video_url}")
    try:
        result = await parser.parse(video_url)
    except VideoParserError as e:
        logger.error(f"解析请求处理失败: {video_url}, 错误: {e.message}")
        return _error('Internal server error. Please try again later.', 500)

    if result.success:
        logger.info(f"解析成功: {result.title}, 直链数: {len(result.candidates)}")
        return web.json_response(result.to_dict())
    logger.info(f"解析失败: {result.error}")
    return web.json_response(result.to_dict(), status=400)


@routes.get('/api/download-proxy')
async def download_proxy(request: web.Request) -> web.StreamResponse:
    """把媒体直链流式转发给客户端。"""
    relay_request = RelayRequest(
        media_url=request.query.get('url', '').strip(),
        filename=request.query.get('filename') or Config.DEFAULT_FILENAME,
        range_header=request.headers.get('Range')
    )
    return await request.app[RELAY_KEY].relay(request, relay_request)


@routes.get('/api/health')
async def health(request: web.Request) -> web.Response:
    return web.json_response({
        'status': 'OK',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'service': Config.SERVICE_NAME,
        'version': __version__,
        'features': list(Config.SERVICE_FEATURES)
    })


async def client_session_ctx(app: web.Application) -> AsyncIterator[None]:
    """创建共享的 aiohttp 会话，并据此组装解析器与转发器。"""
    config_manager = app[CONFIG_KEY]
    connector = aiohttp.TCPConnector(
        limit=Config.CONNECTOR_LIMIT,
        limit_per_host=Config.CONNECTOR_LIMIT_PER_HOST,
        ttl_dns_cache=300,
        enable_cleanup_closed=True
    )
    async with aiohttp.ClientSession(connector=connector) as session:
        app[SESSION_KEY] = session
        if PARSER_KEY not in app:
            app[PARSER_KEY] = FacebookParser(
                PageFetcher(session, config_manager),
                config_manager
            )
        if RELAY_KEY not in app:
            app[RELAY_KEY] = StreamingRelay(session, config_manager)
        yield
    logger.debug("aiohttp 会话已关闭")


def create_app(
    config_manager: Optional[ConfigManager] = None,
    parser: Optional[BaseVideoParser] = None,
    relay: Optional[StreamingRelay] = None
) -> web.Application:
    """创建 Web 应用。

    Args:
        config_manager: 配置管理器（可选）
        parser: 解析器（可选，默认在启动时基于共享会话创建 FacebookParser）
        relay: 转发器（可选，默认在启动时基于共享会话创建）

    Returns:
        aiohttp Web 应用
    """
    app = web.Application(middlewares=[error_middleware])
    app[CONFIG_KEY] = config_manager or ConfigManager()
    if parser is not None:
        app[PARSER_KEY] = parser
    if relay is not None:
        app[RELAY_KEY] = relay
    app.cleanup_ctx.append(client_session_ctx)
    app.add_routes(routes)
    return app


def main():
    config_manager = ConfigManager.from_env()
    logging.basicConfig(
        level=logging.DEBUG if config_manager.debug_mode else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger.info(
        f"{Config.SERVICE_NAME} {__version__} 启动: "
        f"http://{config_manager.host}:{config_manager.port}"
    )
    web.run_app(
        create_app(config_manager),
        host=config_manager.host,
        port=config_manager.port,
        print=None
    )


if __name__ == "__main__":
    main()
