from .facebook import FacebookParser
from .base import BaseVideoParser

__all__ = [
    'FacebookParser',
    'BaseVideoParser'
]
