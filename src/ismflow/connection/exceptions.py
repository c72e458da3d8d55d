"""集群客户端异常定义模块."""

from ..exceptions import IsmFlowError


class ClusterClientError(IsmFlowError):
    """集群客户端基础异常类.

    所有集群客户端相关异常的基类，继承自 IsmFlowError。
    """

    pass


class ConnectionConfigError(ClusterClientError):
    """连接配置校验异常.

    当连接配置参数不合法时抛出，例如 hosts 为空、request_timeout 小于 0 等。
    """

    pass


class ClusterNotFoundError(ClusterClientError):
    """集群未找到异常.

    当请求的集群角色在工厂中不存在时抛出。
    """

    pass


class ActionNotSupportedError(ClusterClientError):
    """不支持的集群动作异常.

    当 call_with_request 收到未注册的动作名称时抛出。
    """

    pass
