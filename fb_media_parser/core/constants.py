# -*- coding: utf-8 -*-


class Config:
    """配置常量类，包含解析、转发等功能的默认参数"""

    # 服务配置
    DEFAULT_HOST = "0.0.0.0"  # 默认监听地址
    DEFAULT_PORT = 3002  # 默认监听端口
    SERVICE_NAME = "Facebook Video Downloader"
    SERVICE_FEATURES = [
        "Real Facebook Video Extraction",
        "Multiple Quality Options",
        "Direct Download"
    ]

    # 超时配置
    PAGE_FETCH_TIMEOUT = 15  # 页面拉取超时时间（秒）
    RELAY_TIMEOUT = 60  # 媒体转发超时时间（秒）
    MAX_REDIRECTS = 5  # 最大重定向次数

    # 流式转发配置
    STREAM_DOWNLOAD_CHUNK_SIZE = 64 * 1024  # 流式转发块大小（字节），64KB

    # 连接池配置
    CONNECTOR_LIMIT = 100  # 连接池最大连接数
    CONNECTOR_LIMIT_PER_HOST = 10  # 单主机最大连接数

    # 下载文件名
    DEFAULT_FILENAME = "facebook_video.mp4"
    DEFAULT_CONTENT_TYPE = "video/mp4"

    # 调试配置
    DEBUG_MODE = False  # 调试模式开关，开启后会输出更详细的调试信息


DESKTOP_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

MOBILE_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 16_0 like Mac OS X) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/16.0 "
    "Mobile/15E148 Safari/604.1"
)

PAGE_HEADERS = {
    "User-Agent": DESKTOP_UA,
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Cache-Control": "max-age=0"
}

MEDIA_HEADERS = {
    "User-Agent": DESKTOP_UA,
    "Accept": (
        "video/webm,video/ogg,video/*;q=0.9,application/ogg;q=0.7,"
        "audio/*;q=0.6,*/*;q=0.5"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "identity",
    "Referer": "https://www.facebook.com/",
    "Origin": "https://www.facebook.com"
}
