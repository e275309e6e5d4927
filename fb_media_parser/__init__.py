# -*- coding: utf-8 -*-
"""Facebook 视频链接解析与流式转发服务。"""

__version__ = "2.0.0"
