"""托管索引 HTTP 服务模块.

使用示例:
    from ismflow.connection import ClusterClientFactory, ClusterConfig
    from ismflow.server import create_app

    app = create_app(ClusterClientFactory([ClusterConfig(hosts=["http://localhost:9200"])]))
"""

from .routes import (
    ChangePolicyBody,
    RemovePolicyBody,
    RetryBody,
    create_app,
    create_router,
)

__all__ = [
    "create_router",
    "create_app",
    "RetryBody",
    "ChangePolicyBody",
    "RemovePolicyBody",
]
