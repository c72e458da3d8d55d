"""ismflow - Index State Management Gateway.

这是一个把管理界面请求转发到集群 ISM（Index State Management）接口的网关库。

主要功能:
    - ManagedIndexService: 托管索引的查询、重试、更换策略、移除策略
    - ClusterClientFactory: 按角色（数据集群 / ISM 集群）管理集群客户端
    - create_app: 暴露 REST 接口的 FastAPI 应用

使用示例:
    from ismflow import ClusterClientFactory, ClusterConfig, GatewayRequest, ManagedIndexService

    factory = ClusterClientFactory([ClusterConfig(hosts=["http://localhost:9200"])])
    service = ManagedIndexService(factory)
    result = service.get_managed_indices(GatewayRequest(query={"search": "logs"}))
"""

__version__ = "0.1.0"

# 导出集群客户端
from ismflow.connection import (
    ClusterClient,
    ClusterClientFactory,
    ClusterConfig,
    ClusterRole,
    ConnectionConfig,
)

# 导出异常
from ismflow.exceptions import IsmFlowError

# 导出托管索引网关
from ismflow.managed_indices import (
    GatewayRequest,
    ManagedIndexService,
    ManagedIndexSettings,
    ServerResponse,
)

__all__ = [
    # 版本
    "__version__",
    # 网关
    "ManagedIndexService",
    "ManagedIndexSettings",
    "GatewayRequest",
    "ServerResponse",
    # 集群客户端
    "ClusterClientFactory",
    "ClusterClient",
    "ClusterConfig",
    "ClusterRole",
    "ConnectionConfig",
    # 异常
    "IsmFlowError",
]
