"""集群客户端工具模块.

提供两个类：
- ClusterClient: 以动作名称（search、get、ism.explain 等）对集群发起调用，
  并把调用方请求中的认证头透传给集群
- ClusterClientFactory: 按集群角色惰性创建并缓存 ClusterClient

客户端基于 opensearch-py：ISM 插件运行在 OpenDistro / OpenSearch 集群上，
elasticsearch-py 8.x 的产品校验会拒绝这类集群的响应。

使用示例:
    from ismflow.connection import ClusterClientFactory, ClusterConfig, ClusterRole

    clusters = [
        ClusterConfig(hosts=["http://localhost:9200"], role=ClusterRole.DATA),
        ClusterConfig(hosts=["http://localhost:9200"], role=ClusterRole.ISM),
    ]

    with ClusterClientFactory(clusters) as factory:
        cluster = factory.get_cluster(ClusterRole.ISM)
        explain = cluster.call_with_request(request, "ism.explain", {"index": "logs-1"})
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import quote

from opensearchpy import OpenSearch

from .exceptions import (
    ActionNotSupportedError,
    ClusterNotFoundError,
    ConnectionConfigError,
)
from .models import ClusterConfig, ClusterRole, ConnectionConfig

logger = logging.getLogger(__name__)

# ISM 动作 -> (HTTP 方法, 接口名)
ISM_ENDPOINTS: dict[str, tuple[str, str]] = {
    "ism.explain": ("GET", "explain"),
    "ism.retry": ("POST", "retry"),
    "ism.change": ("POST", "change_policy"),
    "ism.remove": ("POST", "remove"),
}

# (client, params, 透传请求头) -> 响应 body
ActionHandler = Callable[[OpenSearch, dict[str, Any], dict[str, str]], Any]


def _api_key_header(api_key: str | tuple[str, str]) -> str:
    """构造 API Key 认证头，(id, key) 元组按 base64(id:key) 编码."""
    if isinstance(api_key, (tuple, list)):
        api_key = base64.b64encode(f"{api_key[0]}:{api_key[1]}".encode()).decode()
    return f"ApiKey {api_key}"


class ClusterClient:
    """单个集群角色的调用客户端.

    以 ``call_with_request(request, action, params)`` 的形式对集群发起调用：
    ``request`` 为调用方的请求对象（需提供 ``headers`` 映射，可为 None），
    其中 ``forward_headers`` 配置的请求头会透传到集群，用于以调用方身份访问。

    支持的动作:
        - search: OpenSearch.search(**params)
        - get: OpenSearch.get(**params)
        - ism.explain / ism.retry / ism.change / ism.remove: ISM REST 接口，
          params 中的 index 为逗号分隔的索引名，body 为请求体

    Args:
        client: OpenSearch 客户端实例
        cluster_config: 集群配置
    """

    def __init__(self, client: OpenSearch, cluster_config: ClusterConfig):
        if client is None:
            raise ValueError("client 不能为 None")
        self.client = client
        self._config = cluster_config
        self._actions: dict[str, ActionHandler] = {
            "search": self._search,
            "get": self._get,
        }
        for action in ISM_ENDPOINTS:
            self._actions[action] = self._make_ism_action(action)

    @property
    def role(self) -> ClusterRole:
        """集群角色."""
        return self._config.role

    def supported_actions(self) -> list[str]:
        """列出支持的动作名称."""
        return sorted(self._actions)

    def call_with_request(
        self,
        request: Any,
        action: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """以调用方身份执行集群动作.

        Args:
            request: 调用方请求对象，读取其 headers 属性，可为 None
            action: 动作名称
            params: 动作参数

        Returns:
            集群返回的原始响应 body

        Raises:
            ActionNotSupportedError: 动作名称未注册时抛出
            opensearchpy.TransportError: 集群返回错误时原样抛出
        """
        handler = self._actions.get(action)
        if handler is None:
            raise ActionNotSupportedError(
                f"不支持的集群动作: {action}，可用动作: {self.supported_actions()}"
            )

        logger.debug(f"[{self.role.value}] 执行集群动作 {action}: {params}")
        return handler(self.client, dict(params or {}), self._forwarded_headers(request))

    def _forwarded_headers(self, request: Any) -> dict[str, str]:
        """取出调用方请求中需要透传的请求头."""
        headers = getattr(request, "headers", None) or {}
        return {
            name.lower(): value
            for name, value in headers.items()
            if name.lower() in self._config.forward_headers
        }

    @staticmethod
    def _search(
        client: OpenSearch, params: dict[str, Any], headers: dict[str, str]
    ) -> Any:
        if headers:
            params["headers"] = headers
        return client.search(**params)

    @staticmethod
    def _get(client: OpenSearch, params: dict[str, Any], headers: dict[str, str]) -> Any:
        if headers:
            params["headers"] = headers
        return client.get(**params)

    def _make_ism_action(self, action: str) -> ActionHandler:
        method, endpoint = ISM_ENDPOINTS[action]

        def ism_action(
            client: OpenSearch, params: dict[str, Any], headers: dict[str, str]
        ) -> Any:
            path = f"/{self._config.ism_api_prefix}/{endpoint}"
            index = params.get("index")
            if index:
                path = f"{path}/{quote(index, safe=',*')}"

            return client.transport.perform_request(
                method, path, headers=headers or None, body=params.get("body")
            )

        return ism_action


class ClusterClientFactory:
    """集群客户端工厂.

    按集群角色惰性创建并缓存 ClusterClient。未配置 ISM 角色的集群时，
    ISM 调用回退到 DATA 集群（ISM 插件与数据通常部署在同一集群）。

    Attributes:
        _clusters: 集群配置列表
        _connection_config: 连接池配置
        _clients: 按集群角色缓存的客户端字典

    Examples:
        >>> factory = ClusterClientFactory(
        ...     [
        ...         ClusterConfig(hosts=["http://localhost:9200"]),
        ...     ]
        ... )
        >>> cluster = factory.get_cluster(ClusterRole.ISM)
    """

    def __init__(
        self,
        clusters: list[ClusterConfig],
        connection_config: ConnectionConfig | None = None,
    ) -> None:
        """初始化客户端工厂.

        Args:
            clusters: 集群配置列表，不可为空
            connection_config: 连接池配置，默认使用 ConnectionConfig 的默认值

        Raises:
            ConnectionConfigError: 当 clusters 为空或角色重复时抛出
        """
        if not clusters:
            raise ConnectionConfigError("clusters 不能为空，请提供至少一个集群配置")
        roles = [cluster.role for cluster in clusters]
        if len(roles) != len(set(roles)):
            raise ConnectionConfigError(
                f"集群角色不能重复: {[role.value for role in roles]}"
            )
        self._clusters = clusters
        self._connection_config = connection_config or ConnectionConfig()
        self._clients: dict[ClusterRole, ClusterClient] = {}
        logger.info(f"初始化集群客户端工厂，集群角色: {[r.value for r in roles]}")

    def _create_client(self, cluster_config: ClusterConfig) -> OpenSearch:
        """根据集群配置创建 OpenSearch 客户端实例.

        根据认证方式（Basic Auth / API Key / Bearer Token / 无认证）
        和 SSL 配置构建客户端。API Key 与 Bearer Token 以默认 Authorization 头发送。

        Args:
            cluster_config: 单个集群的配置信息

        Returns:
            OpenSearch 客户端实例
        """
        kwargs: dict = {
            "hosts": cluster_config.hosts,
            "max_retries": self._connection_config.max_retries,
            "retry_on_timeout": self._connection_config.retry_on_timeout,
            "timeout": self._connection_config.request_timeout,
            "http_compress": self._connection_config.http_compress,
            "sniff_on_start": self._connection_config.sniff_on_start,
            "sniff_on_connection_fail": self._connection_config.sniff_on_connection_fail,
        }

        # sniffer_timeout 非空即开启定时嗅探，只在启用嗅探时设置
        if (
            self._connection_config.sniff_on_start
            or self._connection_config.sniff_on_connection_fail
        ):
            kwargs["sniffer_timeout"] = self._connection_config.sniffer_timeout

        # Basic Auth 认证
        if cluster_config.username and cluster_config.password:
            kwargs["http_auth"] = (
                cluster_config.username,
                cluster_config.password,
            )

        # API Key 认证
        if cluster_config.api_key:
            kwargs["headers"] = {
                "authorization": _api_key_header(cluster_config.api_key)
            }

        # Bearer Token 认证
        if cluster_config.bearer_token:
            kwargs["headers"] = {
                "authorization": f"Bearer {cluster_config.bearer_token}"
            }

        # SSL/TLS 配置
        if cluster_config.ca_certs:
            kwargs["ca_certs"] = cluster_config.ca_certs
        kwargs["verify_certs"] = cluster_config.verify_certs

        return OpenSearch(**kwargs)

    def _find_cluster(self, role: ClusterRole) -> ClusterConfig | None:
        for cluster in self._clusters:
            if cluster.role == role:
                return cluster
        return None

    def get_cluster(self, role: ClusterRole) -> ClusterClient:
        """获取指定角色的集群客户端.

        惰性创建并缓存。ISM 角色未配置时回退到 DATA 集群。

        Args:
            role: 集群角色

        Returns:
            ClusterClient 实例

        Raises:
            ClusterNotFoundError: 当指定角色（及其回退角色）的集群都不存在时抛出
        """
        if role in self._clients:
            return self._clients[role]

        cluster = self._find_cluster(role)
        if cluster is None and role == ClusterRole.ISM:
            logger.info("未配置 ISM 集群，回退到 DATA 集群")
            client = self.get_cluster(ClusterRole.DATA)
            self._clients[role] = client
            return client
        if cluster is None:
            raise ClusterNotFoundError(f"未找到角色为 {role.value} 的集群配置")

        client = ClusterClient(self._create_client(cluster), cluster)
        self._clients[role] = client
        return client

    # ============================================================
    # 生命周期管理
    # ============================================================

    def __enter__(self) -> ClusterClientFactory:
        """上下文管理器入口.

        Returns:
            工厂实例自身
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """上下文管理器退出，自动关闭所有客户端."""
        self.close_all()

    def close_all(self) -> None:
        """关闭所有已创建的客户端连接并清空缓存.

        ISM 回退到 DATA 时两个角色共享同一个客户端，只关闭一次。
        关闭后可重新调用 get_cluster() 创建新的客户端。
        """
        closed: set[int] = set()
        for role, cluster_client in self._clients.items():
            if id(cluster_client) in closed:
                continue
            closed.add(id(cluster_client))
            try:
                cluster_client.client.close()
            except Exception as e:
                logger.warning(f"关闭 {role.value} 集群客户端失败: {e}")
        self._clients.clear()
