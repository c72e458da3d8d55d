"""
ismflow 查询工具函数模块

提供配置索引检索用到的 Query String 与排序构建函数
"""

import re
from typing import Any

from .constants import QueryStringLogicOperators

# 匹配需要转义的特殊字符：+ - = & | > < ! ( ) { } [ ] ^ " ~ * ? : \ / 空格
_SPECIAL_CHARS = r'([+\-=&|><!(){}[\]^"~*?\\:\/ ])'
_SPECIAL_CHARS_RE = re.compile(_SPECIAL_CHARS)
# 匹配已经转义的字符，用于避免双重转义
_ESCAPED_SPECIAL_CHARS_RE = re.compile(rf"\\{_SPECIAL_CHARS}")


def escape_query_string(query_string: str) -> str:
    r"""
    转义 Query String 中的特殊字符。

    '+ - = && || > < ! ( ) { } [ ] ^ " ~ * ? : \ /' 等字符在 query string 中具有特殊含义，
    需要转义才能作为普通字符进行搜索。已转义的字符不会被再次转义。

    示例:
        >>> escape_query_string("logs-2024")
        'logs\\-2024'
        >>> escape_query_string("test:value")
        'test\\:value'
        >>> escape_query_string("a\\+b")
        'a\\+b'
    """
    query_string = _ESCAPED_SPECIAL_CHARS_RE.sub(r"\1", query_string)
    return _SPECIAL_CHARS_RE.sub(r"\\\1", query_string)


def build_must_query(field: str, search: str | None) -> dict[str, Any]:
    """
    构建按字段模糊匹配的 query_string 查询。

    搜索词按空白切分，每个词转义后两侧加通配符，词之间为 AND 关系；
    空搜索匹配全部文档。

    示例:
        >>> build_must_query("managed_index.name", "logs app")["query_string"]["query"]
        '*logs* *app*'
        >>> build_must_query("managed_index.name", "  ")["query_string"]["query"]
        '*'

    Args:
        field: 默认检索字段
        search: 用户输入的搜索文本

    Returns:
        query_string 查询字典
    """
    terms = (search or "").split()
    if terms:
        query = " ".join(f"*{escape_query_string(term)}*" for term in terms)
    else:
        query = "*"

    return {
        "query_string": {
            "default_field": field,
            "default_operator": QueryStringLogicOperators.AND,
            "query": query,
        }
    }


def build_sort(
    sort_field: str | None,
    sort_direction: str,
    sort_fields: dict[str, str],
) -> list[dict[str, str]]:
    """
    根据排序白名单构建排序列表。

    不在白名单中的字段返回空列表（不排序），不视为错误。

    Args:
        sort_field: UI 排序字段名
        sort_direction: 排序方向（asc / desc）
        sort_fields: UI 字段到索引字段的白名单映射

    Returns:
        排序列表，例如 [{"managed_index.index": "asc"}]
    """
    backing_field = sort_fields.get(sort_field) if sort_field else None
    if not backing_field:
        return []
    return [{backing_field: sort_direction}]
