"""托管索引网关数据模型定义模块.

分两类：
- TypedDict: 集群返回的原始 snake_case 结构（explain、retry/change/remove 响应）
- dataclass: 返回给 UI 的结构，to_dict() 输出 camelCase 键
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypedDict, TypeVar

from ..core.constants import MANAGED_INDEX_SORT_FIELDS, IsmIndex

T = TypeVar("T")


# ========== 集群原始响应结构 ==========


class ExplainStateMetaData(TypedDict, total=False):
    """explain 响应中的 state 结构."""

    name: str
    start_time: int


class ExplainActionMetaData(TypedDict, total=False):
    """explain 响应中的 action 结构."""

    name: str
    start_time: int
    index: int
    failed: bool
    consumed_retries: int
    last_retry_time: int


class ExplainRetryInfo(TypedDict, total=False):
    """explain 响应中的 retry_info 结构."""

    failed: bool
    consumed_retries: int


class ExplainIndexMetaData(TypedDict, total=False):
    """explain 响应中单个索引的元数据.

    初始化中的索引只带有 policy_id 设置，没有 index 字段。
    """

    index: str
    index_uuid: str
    policy_id: str
    policy_seq_no: int
    policy_primary_term: int
    policy_completed: bool
    rolled_over: bool
    transition_to: str
    state: ExplainStateMetaData
    action: ExplainActionMetaData
    retry_info: ExplainRetryInfo
    info: dict[str, Any]


class FailedIndexPayload(TypedDict, total=False):
    """retry/change/remove 响应中的失败索引项."""

    index_name: str
    index_uuid: str
    reason: str


class PolicyUpdateResponse(TypedDict, total=False):
    """retry/change/remove 响应结构.

    retry 接口在没有失败时可能不返回 failed_indices。
    """

    failures: bool
    updated_indices: int
    failed_indices: list[FailedIndexPayload]


# ========== 请求与配置 ==========


@dataclass
class GatewayRequest:
    """网关收到的一次请求.

    Attributes:
        params: 路径参数，例如 {"id": "..."}
        query: 查询参数
        payload: JSON 请求体
        headers: 请求头，认证相关的头会被透传到集群
    """

    params: dict[str, str] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    payload: Any = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class ManagedIndexSettings:
    """托管索引网关配置.

    Attributes:
        config_index: ISM 配置索引名称
        default_size: 未指定 size 时的分页大小
        sort_fields: UI 排序字段白名单，映射到配置索引字段
    """

    config_index: str = IsmIndex.OPENDISTRO_ISM_CONFIG
    default_size: int = 20
    sort_fields: dict[str, str] = field(
        default_factory=lambda: dict(MANAGED_INDEX_SORT_FIELDS)
    )


# ========== 返回给 UI 的结构 ==========


@dataclass
class StateMetaData:
    """当前所处状态."""

    name: str
    start_time: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "startTime": self.start_time}


@dataclass
class ActionMetaData:
    """当前执行的动作."""

    name: str
    start_time: int | None = None
    action_index: int | None = None
    failed: bool = False
    consumed_retries: int = 0
    last_retry_time: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "startTime": self.start_time,
            "index": self.action_index,
            "failed": self.failed,
            "consumedRetries": self.consumed_retries,
            "lastRetryTime": self.last_retry_time,
        }


@dataclass
class RetryInfo:
    """策略重试信息."""

    failed: bool = False
    consumed_retries: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"failed": self.failed, "consumedRetries": self.consumed_retries}


@dataclass
class ManagedIndexMetaData:
    """explain 接口返回的托管索引实时元数据.

    Attributes:
        index: 索引名称
        index_uuid: 索引 UUID
        policy_id: 策略 ID
        policy_seq_no: 策略文档序列号
        policy_primary_term: 策略文档主分片任期
        policy_completed: 策略是否执行完毕
        rolled_over: 是否已滚动
        transition_to: 即将转换到的状态
        state: 当前状态，可能为 None
        action: 当前动作，可能为 None
        retry_info: 重试信息，可能为 None
        info: 集群附带的说明信息
    """

    index: str
    index_uuid: str | None = None
    policy_id: str | None = None
    policy_seq_no: int | None = None
    policy_primary_term: int | None = None
    policy_completed: bool | None = None
    rolled_over: bool | None = None
    transition_to: str | None = None
    state: StateMetaData | None = None
    action: ActionMetaData | None = None
    retry_info: RetryInfo | None = None
    info: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "indexUuid": self.index_uuid,
            "policyId": self.policy_id,
            "policySeqNo": self.policy_seq_no,
            "policyPrimaryTerm": self.policy_primary_term,
            "policyCompleted": self.policy_completed,
            "rolledOver": self.rolled_over,
            "transitionTo": self.transition_to,
            "state": self.state.to_dict() if self.state else None,
            "action": self.action.to_dict() if self.action else None,
            "retryInfo": self.retry_info.to_dict() if self.retry_info else None,
            "info": self.info,
        }


@dataclass
class ManagedIndexRecord:
    """托管索引记录.

    由配置索引的检索结果与 explain 结果拼装而成，只在请求内存在。

    Attributes:
        index: 索引名称
        index_uuid: 索引 UUID
        policy_id: 策略 ID
        policy_seq_no: 策略文档序列号
        policy_primary_term: 策略文档主分片任期
        policy: 策略文档
        enabled: 是否启用管理
        managed_index_meta_data: 实时生命周期元数据；为 None 表示索引仍在
            初始化（explain 尚无该索引的元数据），这是正常状态而非错误
    """

    index: str
    index_uuid: str | None = None
    policy_id: str | None = None
    policy_seq_no: int | None = None
    policy_primary_term: int | None = None
    policy: dict[str, Any] | None = None
    enabled: bool | None = None
    managed_index_meta_data: ManagedIndexMetaData | None = None

    def to_dict(self) -> dict[str, Any]:
        meta_data = self.managed_index_meta_data
        return {
            "index": self.index,
            "indexUuid": self.index_uuid,
            "policyId": self.policy_id,
            "policySeqNo": self.policy_seq_no,
            "policyPrimaryTerm": self.policy_primary_term,
            "policy": self.policy,
            "enabled": self.enabled,
            "managedIndexMetaData": meta_data.to_dict() if meta_data else None,
        }


@dataclass
class ManagedIndicesPage:
    """托管索引分页结果."""

    managed_indices: list[ManagedIndexRecord] = field(default_factory=list)
    total_managed_indices: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "managedIndices": [record.to_dict() for record in self.managed_indices],
            "totalManagedIndices": self.total_managed_indices,
        }


@dataclass
class FailedIndex:
    """批量操作中失败的单个索引."""

    index_name: str | None
    index_uuid: str | None
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "indexName": self.index_name,
            "indexUuid": self.index_uuid,
            "reason": self.reason,
        }


@dataclass
class PolicyUpdateOutcome:
    """retry/change/remove 的批量结果.

    部分索引失败不会让整个操作失败，失败项按集群返回的顺序逐条列出。

    Attributes:
        failures: 是否存在失败的索引
        updated_indices: 成功更新的索引数量
        failed_indices: 失败的索引列表
    """

    failures: bool = False
    updated_indices: int = 0
    failed_indices: list[FailedIndex] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "failures": self.failures,
            "updatedIndices": self.updated_indices,
            "failedIndices": [item.to_dict() for item in self.failed_indices],
        }


RetryOutcome = PolicyUpdateOutcome
PolicyChangeOutcome = PolicyUpdateOutcome
RemovePolicyOutcome = PolicyUpdateOutcome


@dataclass
class ServerResponse(Generic[T]):
    """网关统一响应.

    成功时 ok 为 True 并携带 response，失败时 ok 为 False 并携带 error 消息。
    """

    ok: bool
    response: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, response: T) -> "ServerResponse[T]":
        return cls(ok=True, response=response)

    @classmethod
    def failure(cls, error: str) -> "ServerResponse[T]":
        return cls(ok=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            return {"ok": False, "error": self.error}
        response = self.response
        if hasattr(response, "to_dict"):
            response = response.to_dict()
        return {"ok": True, "response": response}
