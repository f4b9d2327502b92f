"""
Prometheus 元数据客户端异常定义

层级:
- PrometheusClientError
    - ConfigurationError: 配置非法（时长格式、URI、max-range < chunk-size）
    - InvalidArgumentError: 必需参数为空
    - NotFoundError: bearer token 文件无法读取
    - RemoteError: 远端返回非 2xx 状态
    - TransportIOError: 网络层失败（连接、超时、DNS）
    - MetadataDecodeError: 响应体无法解码为元数据
"""


class PrometheusClientError(Exception):
    """所有客户端异常的基类"""

    pass


class ConfigurationError(PrometheusClientError):
    """配置错误，客户端无法构造"""

    pass


class InvalidArgumentError(PrometheusClientError, ValueError):
    """调用方传入了空的必需参数"""

    pass


class NotFoundError(PrometheusClientError):
    """配置的 bearer token 文件不存在或不可读"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Failed to find/read file: {path}")


class RemoteError(PrometheusClientError):
    """远端服务返回了非成功的 HTTP 状态"""

    def __init__(self, status_code: int, reason: str):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Bad response {status_code}{reason}")


class TransportIOError(PrometheusClientError, OSError):
    """网络层失败（连接被拒绝、超时、DNS 解析失败等）"""

    pass


class MetadataDecodeError(PrometheusClientError):
    """响应体不是合法的元数据文档"""

    pass
