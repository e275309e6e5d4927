# -*- coding: utf-8 -*-
from abc import ABC, abstractmethod
from typing import List

from ...models import ResolutionResult


class BaseVideoParser(ABC):

    def __init__(self, name: str):
        """初始化视频解析器基类

        Args:
            name: 解析器名称
        """
        self.name = name

    @abstractmethod
    def can_parse(self, url: str) -> bool:
        """判断是否可以解析此URL

        Args:
            url: 视频链接

        Returns:
            是否可以解析
        """
        pass

    @abstractmethod
    def extract_links(self, text: str) -> List[str]:
        """从文本中提取链接

        Args:
            text: 输入文本

        Returns:
            提取到的链接列表
        """
        pass

    @abstractmethod
    async def parse(self, url: str) -> ResolutionResult:
        """解析单个视频链接

        Args:
            url: 视频链接

        Returns:
            解析结果：
            - 成功时包含标题、封面、时长以及按质量排序的直链候选
            - 所有方式均失败时为带失败原因的结果

        Raises:
            ParseError: 出现非网络类的意外错误时
        """
        pass
