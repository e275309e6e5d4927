# -*- coding: utf-8 -*-
import asyncio
import logging
from typing import Dict, Optional

import aiohttp

from ..config_manager import ConfigManager
from ..exceptions import NetworkError

logger = logging.getLogger(__name__)


class PageFetcher:
    """拉取页面 HTML，统一超时与重定向限制。"""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        config_manager: Optional[ConfigManager] = None
    ):
        """初始化页面拉取器。

        Args:
            session: aiohttp会话
            config_manager: 配置管理器（可选，默认使用默认配置）
        """
        self.session = session
        self.config_manager = config_manager or ConfigManager()

    async def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> str:
        """拉取页面 HTML。

        Args:
            url: 页面链接
            headers: 请求头（可选，默认使用桌面端请求头）

        Returns:
            HTML 文本

        Raises:
            NetworkError: 当请求失败、超时、重定向过多或状态码非 2xx 时
        """
        timeout = aiohttp.ClientTimeout(total=self.config_manager.page_fetch_timeout)
        try:
            async with self.session.get(
                url,
                headers=headers or self.config_manager.page_headers,
                timeout=timeout,
                max_redirects=self.config_manager.max_redirects
            ) as response:
                if not 200 <= response.status < 300:
                    raise NetworkError(
                        f"无法获取页面内容，状态码: {response.status}",
                        url=url,
                        status_code=response.status
                    )
                return await response.text(errors='replace')
        except asyncio.TimeoutError as e:
            raise NetworkError(f"页面请求超时: {url}", url=url, original_error=e)
        except aiohttp.ClientError as e:
            raise NetworkError(f"页面请求失败: {e}", url=url, original_error=e)
