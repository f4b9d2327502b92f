"""
Prometheus 元数据 Provider

- PrometheusClient: schema / table 查询入口（带 TTL 缓存）
- JsonMetadataDecoder: 默认响应解码器
- SignatureTypeResolver: 默认列类型解析器

使用示例:
    from prometheus_metadata.providers.prometheus import PrometheusClient
    from prometheus_metadata.core.config import settings

    client = PrometheusClient.from_settings(settings)
    tables = client.get_table_names("default")
"""

from .client import (
    DEFAULT_SCHEMA,
    METRICS_ENDPOINT,
    PrometheusClient,
    build_metrics_uri,
    get_prometheus_client,
    reset_prometheus_client,
)
from .decoder import JsonMetadataDecoder, MetadataDecoder
from .types import SignatureTypeResolver, TypeResolver

__all__ = [
    "DEFAULT_SCHEMA",
    "METRICS_ENDPOINT",
    "PrometheusClient",
    "build_metrics_uri",
    "get_prometheus_client",
    "reset_prometheus_client",
    "JsonMetadataDecoder",
    "MetadataDecoder",
    "SignatureTypeResolver",
    "TypeResolver",
]
