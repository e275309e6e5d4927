# -*- coding: utf-8 -*-
"""核心模块。"""
# 延迟导入以避免循环导入
# 这些模块在需要时才会被导入

__all__ = [
    'ConfigManager',
    'FacebookParser',
    'PageFetcher',
    'StreamingRelay',
]


def __getattr__(name):
    """延迟导入模块以避免循环导入。"""
    if name == 'ConfigManager':
        from .config_manager import ConfigManager
        return ConfigManager
    elif name == 'FacebookParser':
        from .parser import FacebookParser
        return FacebookParser
    elif name == 'PageFetcher':
        from .parser import PageFetcher
        return PageFetcher
    elif name == 'StreamingRelay':
        from .downloader import StreamingRelay
        return StreamingRelay
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
