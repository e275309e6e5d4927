# -*- coding: utf-8 -*-
"""配置管理类，用于统一解析和管理配置。"""
import os
from typing import Dict, Any, Mapping, Optional

from dotenv import load_dotenv

from .constants import Config, PAGE_HEADERS, MEDIA_HEADERS, MOBILE_UA
from .exceptions import ConfigurationError


_ENV_KEYS = {
    "HOST": ("server_settings", "host", str),
    "PORT": ("server_settings", "port", int),
    "PAGE_FETCH_TIMEOUT": ("fetch_settings", "page_fetch_timeout", float),
    "MAX_REDIRECTS": ("fetch_settings", "max_redirects", int),
    "RELAY_TIMEOUT": ("relay_settings", "relay_timeout", float),
}

_TRUE_VALUES = ("1", "true", "yes", "on")


class ConfigManager:
    """配置管理类。"""

    def __init__(self, config: Optional[Dict[str, Any]] = None, validate: bool = True):
        """初始化配置管理器。

        Args:
            config: 配置字典，为None时全部使用默认值
            validate: 是否验证配置，默认为True

        Raises:
            ConfigurationError: 当配置验证失败时
        """
        self.config = config or {}
        if validate:
            self._validate_config()
        self._parse_config()

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[str] = None
    ) -> "ConfigManager":
        """从环境变量（及 .env 文件）构建配置管理器。

        Args:
            environ: 环境变量映射，默认为 os.environ
            dotenv_path: .env 文件路径（可选）

        Returns:
            配置管理器实例

        Raises:
            ConfigurationError: 当环境变量取值无法转换时
        """
        if environ is None:
            load_dotenv(dotenv_path)
            environ = os.environ

        config: Dict[str, Any] = {}
        for env_key, (section, key, caster) in _ENV_KEYS.items():
            raw = environ.get(env_key)
            if raw is None or raw == "":
                continue
            try:
                value = caster(raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"环境变量{env_key}取值无效: {raw}",
                    config_key=f"{section}.{key}",
                    original_error=e
                )
            config.setdefault(section, {})[key] = value

        debug = environ.get("DEBUG")
        if debug:
            config["debug_mode"] = debug.strip().lower() in _TRUE_VALUES
        return cls(config)

    def _validate_config(self):
        """验证配置的有效性。

        Raises:
            ConfigurationError: 当配置无效时
        """
        server_settings = self.config.get("server_settings", {})
        port = server_settings.get("port", Config.DEFAULT_PORT)
        if not isinstance(port, int) or isinstance(port, bool) or not 0 < port < 65536:
            raise ConfigurationError(
                f"port必须是1-65535之间的整数，当前值: {port}",
                config_key="server_settings.port"
            )
        host = server_settings.get("host", Config.DEFAULT_HOST)
        if not isinstance(host, str) or not host:
            raise ConfigurationError(
                f"host必须是非空字符串，当前值: {host}",
                config_key="server_settings.host"
            )

        fetch_settings = self.config.get("fetch_settings", {})
        self._check_positive(
            fetch_settings.get("page_fetch_timeout", Config.PAGE_FETCH_TIMEOUT),
            "fetch_settings.page_fetch_timeout"
        )
        max_redirects = fetch_settings.get("max_redirects", Config.MAX_REDIRECTS)
        if not isinstance(max_redirects, int) or isinstance(max_redirects, bool) or max_redirects < 0:
            raise ConfigurationError(
                f"max_redirects必须是非负整数，当前值: {max_redirects}",
                config_key="fetch_settings.max_redirects"
            )

        relay_settings = self.config.get("relay_settings", {})
        self._check_positive(
            relay_settings.get("relay_timeout", Config.RELAY_TIMEOUT),
            "relay_settings.relay_timeout"
        )
        chunk_size = relay_settings.get(
            "stream_chunk_size",
            Config.STREAM_DOWNLOAD_CHUNK_SIZE
        )
        if not isinstance(chunk_size, int) or isinstance(chunk_size, bool) or chunk_size < 1:
            raise ConfigurationError(
                f"stream_chunk_size必须是大于0的整数，当前值: {chunk_size}",
                config_key="relay_settings.stream_chunk_size"
            )

    @staticmethod
    def _check_positive(value: Any, config_key: str):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigurationError(
                f"{config_key.split('.')[-1]}必须是正数，当前值: {value}",
                config_key=config_key
            )

    def _parse_config(self):
        """解析配置。"""
        # 服务设置
        server_settings = self.config.get("server_settings", {})
        self.host = server_settings.get("host", Config.DEFAULT_HOST)
        self.port = server_settings.get("port", Config.DEFAULT_PORT)

        # 页面拉取设置
        fetch_settings = self.config.get("fetch_settings", {})
        self.page_fetch_timeout = fetch_settings.get(
            "page_fetch_timeout",
            Config.PAGE_FETCH_TIMEOUT
        )
        self.max_redirects = fetch_settings.get(
            "max_redirects",
            Config.MAX_REDIRECTS
        )
        self.page_headers = {
            **PAGE_HEADERS,
            **fetch_settings.get("page_headers", {})
        }
        self.mobile_user_agent = fetch_settings.get(
            "mobile_user_agent",
            MOBILE_UA
        )

        # 转发设置
        relay_settings = self.config.get("relay_settings", {})
        self.relay_timeout = relay_settings.get(
            "relay_timeout",
            Config.RELAY_TIMEOUT
        )
        self.stream_chunk_size = relay_settings.get(
            "stream_chunk_size",
            Config.STREAM_DOWNLOAD_CHUNK_SIZE
        )
        self.media_headers = {
            **MEDIA_HEADERS,
            **relay_settings.get("media_headers", {})
        }

        # 其他设置
        self.debug_mode = bool(self.config.get("debug_mode", Config.DEBUG_MODE))

    def get_mobile_headers(self) -> Dict[str, str]:
        """获取移动端页面请求头。

        Returns:
            以移动端 User-Agent 覆盖后的页面请求头
        """
        return {**self.page_headers, "User-Agent": self.mobile_user_agent}
