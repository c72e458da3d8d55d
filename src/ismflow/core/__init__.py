"""ismflow 核心模块."""

from .constants import (
    MANAGED_INDEX_SORT_FIELDS,
    SORT_DIRECTIONS,
    IsmIndex,
    ManagedIndexField,
)
from .utils import build_must_query, build_sort, escape_query_string

__all__ = [
    # 常量
    "IsmIndex",
    "ManagedIndexField",
    "MANAGED_INDEX_SORT_FIELDS",
    "SORT_DIRECTIONS",
    # 工具函数
    "escape_query_string",
    "build_must_query",
    "build_sort",
]
