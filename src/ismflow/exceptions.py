"""ismflow 异常定义模块."""


class IsmFlowError(Exception):
    """ismflow 基础异常类."""

    pass
