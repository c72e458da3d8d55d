"""集群客户端模块 - 统一管理网关访问的数据集群与 ISM 集群.

主要组件:
    - ClusterClientFactory: 客户端工厂，按集群角色惰性创建并缓存客户端
    - ClusterClient: 以动作名称对集群发起调用，透传调用方认证头
    - ClusterConfig: 集群配置模型
    - ConnectionConfig: 连接池配置模型
    - ClusterRole: 集群角色枚举

使用示例:
    from ismflow.connection import ClusterClientFactory, ClusterConfig, ClusterRole

    factory = ClusterClientFactory([ClusterConfig(hosts=["http://localhost:9200"])])
    cluster = factory.get_cluster(ClusterRole.DATA)
"""

from .exceptions import (
    ActionNotSupportedError,
    ClusterClientError,
    ClusterNotFoundError,
    ConnectionConfigError,
)
from .models import (
    OPENDISTRO_ISM_API_PREFIX,
    OPENSEARCH_ISM_API_PREFIX,
    ClusterConfig,
    ClusterRole,
    ConnectionConfig,
)
from .tool import ClusterClient, ClusterClientFactory

__all__ = [
    # 工厂与客户端
    "ClusterClientFactory",
    "ClusterClient",
    # 模型
    "ClusterConfig",
    "ConnectionConfig",
    "ClusterRole",
    "OPENDISTRO_ISM_API_PREFIX",
    "OPENSEARCH_ISM_API_PREFIX",
    # 异常
    "ClusterClientError",
    "ConnectionConfigError",
    "ClusterNotFoundError",
    "ActionNotSupportedError",
]
