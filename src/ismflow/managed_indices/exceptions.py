"""托管索引网关异常定义模块."""

from ..exceptions import IsmFlowError


class ManagedIndexError(IsmFlowError):
    """托管索引网关基础异常类."""

    pass


class RequestValidationError(ManagedIndexError):
    """请求参数校验异常.

    当查询参数或请求体不合法时抛出，例如 indices 为空、from 不是整数等。
    网关在边界处将其转换为失败响应，不会向调用方抛出。
    """

    pass
