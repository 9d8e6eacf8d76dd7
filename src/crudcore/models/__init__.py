r"""
Single import point for the value types shared across layers.

    from crudcore.models import EntityMetadata, FindModelOptions, ErrorInfo, BaseErrors
"""

from crudcore.exceptions.base import AppException, BaseErrors, ErrorInfo

from .entity import BaseEntity, EntityMetadata, FindModelOptions, QueryParams

__all__ = [
    "AppException",
    "BaseEntity",
    "BaseErrors",
    "EntityMetadata",
    "ErrorInfo",
    "FindModelOptions",
    "QueryParams",
]
