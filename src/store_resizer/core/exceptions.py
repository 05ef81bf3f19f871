"""项目内使用的自定义异常定义。"""


class StoreResizerError(Exception):
    """基础异常类型。"""


class InvalidConfigurationError(StoreResizerError):
    """配置不合法时抛出。"""


class InvalidTargetSizeError(InvalidConfigurationError):
    """目标宽高非数字或不大于 0 时抛出。"""
