from .base_controller import BaseController
from .common import CommonModule, register_common
from .filters import AppExceptionFilter
from .platform import AsgiAdapter, HttpAdapter, StarletteAdapter, create_adapter

__all__ = [
    "AppExceptionFilter",
    "AsgiAdapter",
    "BaseController",
    "CommonModule",
    "HttpAdapter",
    "StarletteAdapter",
    "create_adapter",
    "register_common",
]
