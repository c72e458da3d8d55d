"""集群响应转换函数模块.

把集群返回的 snake_case 结构逐字段映射为 models 中的 UI 结构。
"""

from typing import Any

from .models import (
    ActionMetaData,
    ExplainActionMetaData,
    ExplainIndexMetaData,
    ExplainRetryInfo,
    ExplainStateMetaData,
    FailedIndex,
    FailedIndexPayload,
    ManagedIndexMetaData,
    ManagedIndexRecord,
    PolicyUpdateOutcome,
    PolicyUpdateResponse,
    RetryInfo,
    StateMetaData,
)


def transform_state(state: ExplainStateMetaData | None) -> StateMetaData | None:
    """转换 explain 中的 state."""
    if not state:
        return None
    return StateMetaData(name=state.get("name", ""), start_time=state.get("start_time"))


def transform_action(action: ExplainActionMetaData | None) -> ActionMetaData | None:
    """转换 explain 中的 action."""
    if not action:
        return None
    return ActionMetaData(
        name=action.get("name", ""),
        start_time=action.get("start_time"),
        action_index=action.get("index"),
        failed=action.get("failed", False),
        consumed_retries=action.get("consumed_retries", 0),
        last_retry_time=action.get("last_retry_time"),
    )


def transform_retry_info(retry_info: ExplainRetryInfo | None) -> RetryInfo | None:
    """转换 explain 中的 retry_info."""
    if not retry_info:
        return None
    return RetryInfo(
        failed=retry_info.get("failed", False),
        consumed_retries=retry_info.get("consumed_retries", 0),
    )


def transform_managed_index_meta_data(
    meta_data: ExplainIndexMetaData | None,
) -> ManagedIndexMetaData | None:
    """转换单个索引的 explain 元数据.

    以下两种情况返回 None，表示索引仍在初始化：
    - explain 响应中没有该索引
    - 有该索引但没有 index 字段（只返回了 policy_id 设置）

    Args:
        meta_data: explain 响应中该索引对应的值

    Returns:
        托管索引元数据，初始化中返回 None
    """
    if not meta_data or not isinstance(meta_data, dict):
        return None
    if not meta_data.get("index"):
        return None

    return ManagedIndexMetaData(
        index=meta_data["index"],
        index_uuid=meta_data.get("index_uuid"),
        policy_id=meta_data.get("policy_id"),
        policy_seq_no=meta_data.get("policy_seq_no"),
        policy_primary_term=meta_data.get("policy_primary_term"),
        policy_completed=meta_data.get("policy_completed"),
        rolled_over=meta_data.get("rolled_over"),
        transition_to=meta_data.get("transition_to"),
        state=transform_state(meta_data.get("state")),
        action=transform_action(meta_data.get("action")),
        retry_info=transform_retry_info(meta_data.get("retry_info")),
        info=meta_data.get("info"),
    )


def transform_managed_index_hit(
    hit: dict[str, Any],
    explain_response: dict[str, Any],
) -> ManagedIndexRecord:
    """把配置索引中的一条命中与 explain 结果拼装为托管索引记录.

    Args:
        hit: 配置索引检索命中（含 _source.managed_index）
        explain_response: explain 接口响应，以索引名为键

    Returns:
        托管索引记录
    """
    managed_index = hit["_source"]["managed_index"]
    index = managed_index["index"]
    return ManagedIndexRecord(
        index=index,
        index_uuid=managed_index.get("index_uuid"),
        policy_id=managed_index.get("policy_id"),
        policy_seq_no=managed_index.get("policy_seq_no"),
        policy_primary_term=managed_index.get("policy_primary_term"),
        policy=managed_index.get("policy"),
        enabled=managed_index.get("enabled"),
        managed_index_meta_data=transform_managed_index_meta_data(
            explain_response.get(index)
        ),
    )


def transform_failed_indices(
    failed_indices: list[FailedIndexPayload] | None,
) -> list[FailedIndex]:
    """逐条转换失败索引列表，保持原有顺序.

    缺少 index_name 的条目保留，index_name 为 None；非对象条目跳过。
    """
    return [
        FailedIndex(
            index_name=item.get("index_name"),
            index_uuid=item.get("index_uuid"),
            reason=item.get("reason", ""),
        )
        for item in failed_indices or []
        if isinstance(item, dict)
    ]


def transform_policy_update_response(
    response: PolicyUpdateResponse,
) -> PolicyUpdateOutcome:
    """转换 retry/change/remove 接口响应.

    Args:
        response: 集群响应

    Returns:
        批量结果；failed_indices 缺失时为空列表
    """
    return PolicyUpdateOutcome(
        failures=bool(response.get("failures", False)),
        updated_indices=response.get("updated_indices", 0),
        failed_indices=transform_failed_indices(response.get("failed_indices")),
    )


def get_total_hits(response: dict[str, Any]) -> int:
    """读取检索响应的命中总数，兼容 hits.total 为整数或 {"value": n} 两种格式."""
    total_info = response.get("hits", {}).get("total", 0)
    if isinstance(total_info, dict):
        return total_info.get("value", 0)
    return total_info or 0
