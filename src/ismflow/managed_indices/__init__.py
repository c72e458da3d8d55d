"""托管索引网关模块.

该模块把管理界面的请求转发到集群的 ISM 接口，包括：
- 按 ID 获取托管索引文档
- 分页列出托管索引并附带 explain 元数据
- 重试失败的策略
- 更换策略
- 移除策略

示例用法:
    >>> from ismflow.connection import ClusterClientFactory, ClusterConfig
    >>> from ismflow.managed_indices import GatewayRequest, ManagedIndexService
    >>> factory = ClusterClientFactory([ClusterConfig(hosts=["http://localhost:9200"])])
    >>> service = ManagedIndexService(factory)
    >>> result = service.retry_managed_index_policy(
    ...     GatewayRequest(payload={"index": ["logs-000001"]})
    ... )
    >>> result.to_dict()
"""

from .exceptions import ManagedIndexError, RequestValidationError
from .models import (
    ActionMetaData,
    FailedIndex,
    GatewayRequest,
    ManagedIndexMetaData,
    ManagedIndexRecord,
    ManagedIndexSettings,
    ManagedIndicesPage,
    PolicyChangeOutcome,
    PolicyUpdateOutcome,
    RemovePolicyOutcome,
    RetryInfo,
    RetryOutcome,
    ServerResponse,
    StateMetaData,
)
from .service import ManagedIndexService
from .transforms import (
    transform_failed_indices,
    transform_managed_index_meta_data,
    transform_policy_update_response,
)

__all__ = [
    # 核心类
    "ManagedIndexService",
    # 请求与配置
    "GatewayRequest",
    "ManagedIndexSettings",
    # 数据模型
    "ManagedIndexRecord",
    "ManagedIndexMetaData",
    "StateMetaData",
    "ActionMetaData",
    "RetryInfo",
    "ManagedIndicesPage",
    "FailedIndex",
    "PolicyUpdateOutcome",
    "RetryOutcome",
    "PolicyChangeOutcome",
    "RemovePolicyOutcome",
    "ServerResponse",
    # 转换函数
    "transform_managed_index_meta_data",
    "transform_failed_indices",
    "transform_policy_update_response",
    # 异常类
    "ManagedIndexError",
    "RequestValidationError",
]
