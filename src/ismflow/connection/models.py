"""集群客户端数据模型定义模块.

提供集群客户端相关的数据模型，包括：
- ClusterRole: 集群角色枚举
- ClusterConfig: 集群配置
- ConnectionConfig: 连接池配置
"""

from dataclasses import dataclass, field
from enum import Enum

from .exceptions import ConnectionConfigError

# ISM 插件 REST 路径前缀
OPENDISTRO_ISM_API_PREFIX = "_opendistro/_ism"
OPENSEARCH_ISM_API_PREFIX = "_plugins/_ism"


class ClusterRole(Enum):
    """集群角色枚举.

    用于区分网关访问的两类集群。

    Attributes:
        DATA: 通用数据集群，负责配置索引的检索
        ISM: 生命周期管理集群，负责 explain/retry/change/remove 等 ISM 调用
    """

    DATA = "data"
    ISM = "ism"


@dataclass
class ClusterConfig:
    """集群配置模型.

    定义单个集群的连接信息，包括地址、角色、认证方式以及 ISM 接口路径。

    Attributes:
        hosts: 节点地址列表（必需，不可为空）
        role: 集群角色，默认 DATA
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证（字符串或元组）
        bearer_token: Bearer Token 认证
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True
        ism_api_prefix: ISM 接口路径前缀，默认 "_opendistro/_ism"
        forward_headers: 需要从调用方请求透传到集群的请求头（小写）

    Raises:
        ConnectionConfigError: 当 hosts 为空或 ism_api_prefix 为空时抛出

    Examples:
        >>> config = ClusterConfig(
        ...     hosts=["http://localhost:9200"],
        ...     role=ClusterRole.ISM,
        ...     ism_api_prefix="_plugins/_ism",
        ... )
    """

    hosts: list[str] = field(default_factory=list)
    role: ClusterRole = ClusterRole.DATA
    username: str | None = None
    password: str | None = None
    api_key: str | tuple[str, str] | None = None
    bearer_token: str | None = None
    ca_certs: str | None = None
    verify_certs: bool = True
    ism_api_prefix: str = OPENDISTRO_ISM_API_PREFIX
    forward_headers: tuple[str, ...] = ("authorization",)

    def __post_init__(self) -> None:
        """校验集群配置参数合法性."""
        if not self.hosts:
            raise ConnectionConfigError("hosts 不能为空，请提供至少一个节点地址")
        self.ism_api_prefix = self.ism_api_prefix.strip("/")
        if not self.ism_api_prefix:
            raise ConnectionConfigError("ism_api_prefix 不能为空")
        self.forward_headers = tuple(h.lower() for h in self.forward_headers)


@dataclass
class ConnectionConfig:
    """连接池配置模型.

    定义客户端的连接参数和传输层重试策略。网关自身不做重试，
    这里的重试由 opensearch-py 客户端的传输层负责。

    Attributes:
        max_retries: 最大重试次数，默认 3
        retry_on_timeout: 超时是否重试，默认 True
        request_timeout: 请求超时时间（秒），默认 30，必须 >= 0
        http_compress: 是否启用 HTTP 压缩，默认 True
        sniff_on_start: 启动时是否嗅探节点，默认 False
        sniff_on_connection_fail: 连接失败时是否嗅探，默认 False
        sniffer_timeout: 定时嗅探间隔（秒），默认 60，仅在启用嗅探时生效

    Raises:
        ConnectionConfigError: 当参数不合法时抛出
    """

    max_retries: int = 3
    retry_on_timeout: bool = True
    request_timeout: int = 30
    http_compress: bool = True
    sniff_on_start: bool = False
    sniff_on_connection_fail: bool = False
    sniffer_timeout: int = 60

    def __post_init__(self) -> None:
        """校验连接池配置参数合法性."""
        if self.max_retries < 0:
            raise ConnectionConfigError(
                f"max_retries 必须 >= 0，当前值: {self.max_retries}"
            )
        if self.request_timeout < 0:
            raise ConnectionConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )
