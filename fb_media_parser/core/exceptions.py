# -*- coding: utf-8 -*-
"""视频解析器异常定义。"""


class VideoParserError(Exception):
    """视频解析器基础异常类。
    
    所有视频解析器相关的异常都应继承此类。
    """
    
    def __init__(self, message: str, error_code: str = None, original_error: Exception = None):
        """初始化异常。

        Args:
            message: 错误消息
            error_code: 错误代码（可选）
            original_error: 原始异常（可选）
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.original_error = original_error


class ParseError(VideoParserError):
    """解析错误。
    
    当视频链接解析过程中出现非网络类的意外错误时抛出此异常。
    """
    
    def __init__(self, message: str, url: str = None, original_error: Exception = None):
        """初始化解析错误。

        Args:
            message: 错误消息
            url: 解析失败的URL（可选）
            original_error: 原始异常（可选）
        """
        super().__init__(message, error_code="PARSE_ERROR", original_error=original_error)
        self.url = url


class ConfigurationError(VideoParserError):
    """配置错误。
    
    当配置无效或缺失时抛出此异常。
    """
    
    def __init__(self, message: str, config_key: str = None, original_error: Exception = None):
        """初始化配置错误。

        Args:
            message: 错误消息
            config_key: 配置键（可选）
            original_error: 原始异常（可选）
        """
        super().__init__(message, error_code="CONFIG_ERROR", original_error=original_error)
        self.config_key = config_key


class NetworkError(VideoParserError):
    """网络错误。
    
    当上游请求失败（连接错误、超时、重定向过多或非成功状态码）时抛出此异常。
    """
    
    def __init__(
        self,
        message: str,
        url: str = None,
        status_code: int = None,
        original_error: Exception = None
    ):
        """初始化网络错误。

        Args:
            message: 错误消息
            url: 请求的URL（可选）
            status_code: HTTP状态码（可选）
            original_error: 原始异常（可选）
        """
        super().__init__(message, error_code="NETWORK_ERROR", original_error=original_error)
        self.url = url
        self.status_code = status_code
