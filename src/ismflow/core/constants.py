"""ismflow 常量定义模块."""


class IsmIndex:
    """ISM 相关索引常量."""

    # ISM 插件保存 managed_index 文档的配置索引
    OPENDISTRO_ISM_CONFIG = ".opendistro-ism-config"


class ManagedIndexField:
    """配置索引中 managed_index 文档的字段路径."""

    ROOT = "managed_index"
    NAME = "managed_index.name"
    INDEX = "managed_index.index"
    POLICY_ID = "managed_index.policy_id"


# UI 排序字段 -> 配置索引字段
MANAGED_INDEX_SORT_FIELDS: dict[str, str] = {
    "index": ManagedIndexField.INDEX,
    "policyId": ManagedIndexField.POLICY_ID,
}

SORT_DIRECTIONS = ("asc", "desc")


class QueryStringLogicOperators:
    """Query String 逻辑操作符."""

    AND = "AND"
