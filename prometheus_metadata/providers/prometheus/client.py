"""
PrometheusClient - 元数据客户端

向查询引擎暴露 schema / table 元数据:
- schema 固定为 "default"
- table 即 Prometheus 中的 metric 名称，来自 /api/v1/label/__name__/values
- 每个 table 的列结构相同: labels, timestamp, value

metric 列表通过 SingleFlightCache 缓存，TTL 由 cache_duration 决定。

使用示例:
    client = PrometheusClient(config, JsonMetadataDecoder(), SignatureTypeResolver())

    client.get_schema_names()               # {"default"}
    client.get_table_names("default")       # {"up", "go_goroutines", ...}
    client.get_table("default", "up")       # PrometheusTable(name="up", columns=...)
"""

import logging
import threading
from typing import Optional, Set, Tuple

import httpx

from prometheus_metadata.core.cache import SingleFlightCache
from prometheus_metadata.core.config import PrometheusConfig, Settings, settings
from prometheus_metadata.core.duration import to_seconds
from prometheus_metadata.core.exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    MetadataDecodeError,
)
from prometheus_metadata.core.http_client import PrometheusHttpClient
from prometheus_metadata.providers.prometheus.decoder import (
    JsonMetadataDecoder,
    MetadataDecoder,
)
from prometheus_metadata.providers.prometheus.types import (
    LABELS_TYPE_SIGNATURE,
    TIMESTAMP_TYPE_SIGNATURE,
    VALUE_TYPE_SIGNATURE,
    SignatureTypeResolver,
    TypeResolver,
)
from prometheus_metadata.schemas.metadata import (
    MetadataSnapshot,
    PrometheusColumn,
    PrometheusTable,
)

logger = logging.getLogger(__name__)

# schema 名称固定为 "default"
DEFAULT_SCHEMA = "default"
METRICS_ENDPOINT = "/api/v1/label/__name__/values"


def build_metrics_uri(prometheus_uri: str) -> str:
    """
    根据 Prometheus 地址拼接 metric 名称列表接口

    保留 scheme、host、port 和 path，丢弃 query 与 fragment。

    Raises:
        ConfigurationError: 地址无法解析或不是 http(s) 地址
    """
    try:
        url = httpx.URL(prometheus_uri)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(f"Invalid prometheus URI: {prometheus_uri!r}") from e

    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Invalid prometheus URI: {prometheus_uri!r}")

    netloc = url.netloc.decode("ascii")
    path = url.path.rstrip("/")
    return f"{url.scheme}://{netloc}{path}{METRICS_ENDPOINT}"


class PrometheusClient:
    """
    Prometheus 元数据客户端

    构造时只做配置校验，不发起网络请求；首次查询 table 时才拉取 metric 列表。
    线程安全，可被多个查询线程并发调用。
    """

    def __init__(
        self,
        config: PrometheusConfig,
        metadata_decoder: MetadataDecoder,
        type_resolver: TypeResolver,
        http_client: Optional[PrometheusHttpClient] = None,
    ):
        if config is None:
            raise InvalidArgumentError("config is null")
        if metadata_decoder is None:
            raise InvalidArgumentError("metadata_decoder is null")
        if type_resolver is None:
            raise InvalidArgumentError("type_resolver is null")

        self.max_query_range_seconds = to_seconds(config.max_query_range_duration)
        self.query_chunk_size_seconds = to_seconds(config.query_chunk_size_duration)
        if self.max_query_range_seconds < self.query_chunk_size_seconds:
            raise ConfigurationError(
                "max-query-range-duration must be greater than query-chunk-size-duration"
            )

        self.config = config
        self.metrics_uri = build_metrics_uri(config.prometheus_uri)
        self.cache_ttl_seconds = to_seconds(config.cache_duration)
        if self.cache_ttl_seconds <= 0:
            raise ConfigurationError("cache-duration must be greater than zero")
        self.metadata_decoder = metadata_decoder
        self.http_client = http_client or PrometheusHttpClient(
            bearer_token_file=config.bearer_token_file,
            timeout=config.http_timeout,
            max_attempts=config.fetch_max_attempts,
        )
        self._metadata_cache: SingleFlightCache[MetadataSnapshot] = SingleFlightCache(
            self._load_metadata, ttl=self.cache_ttl_seconds
        )
        self.columns: Tuple[PrometheusColumn, ...] = (
            PrometheusColumn(
                name="labels", type=type_resolver.get_type(LABELS_TYPE_SIGNATURE)
            ),
            PrometheusColumn(
                name="timestamp", type=type_resolver.get_type(TIMESTAMP_TYPE_SIGNATURE)
            ),
            PrometheusColumn(
                name="value", type=type_resolver.get_type(VALUE_TYPE_SIGNATURE)
            ),
        )

        logger.info(
            "Initialized PrometheusClient: metrics_uri=%s, cache_ttl=%ds, "
            "max_query_range=%ds, query_chunk_size=%ds",
            self.metrics_uri,
            self.cache_ttl_seconds,
            self.max_query_range_seconds,
            self.query_chunk_size_seconds,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PrometheusClient":
        """使用默认解码器和类型解析器，根据环境配置创建客户端"""
        return cls(
            settings.to_prometheus_config(),
            JsonMetadataDecoder(),
            SignatureTypeResolver(),
        )

    def _load_metadata(self) -> MetadataSnapshot:
        body = self.http_client.fetch(self.metrics_uri)
        try:
            document = self.metadata_decoder.decode(body)
            snapshot = MetadataSnapshot.model_validate(document)
        except (ValueError, TypeError) as e:
            logger.error("Failed to decode metadata from %s: %s", self.metrics_uri, e)
            raise MetadataDecodeError(
                f"Failed to decode metadata from {self.metrics_uri}: {e}"
            ) from e

        if not snapshot.is_success:
            # 非 success 状态不抛异常，查询侧看到的是空 table 列表
            logger.warning(
                "Prometheus returned status=%s (errorType=%s, error=%s), no tables available",
                snapshot.status,
                snapshot.error_type,
                snapshot.error,
            )
        elif snapshot.warnings:
            logger.warning("Prometheus returned warnings: %s", snapshot.warnings)

        logger.info(
            "Refreshed metric metadata: status=%s, %d metrics",
            snapshot.status,
            len(snapshot.data or ()),
        )
        return snapshot

    def get_metadata(self) -> MetadataSnapshot:
        """获取（缓存的）metric 元数据，保留远端返回的顺序"""
        return self._metadata_cache.get()

    def get_schema_names(self) -> Set[str]:
        return {DEFAULT_SCHEMA}

    def get_table_names(self, schema: str) -> Set[str]:
        """
        列出 schema 下的 table

        Args:
            schema: schema 名称，只有 "default" 有 table

        Returns:
            metric 名称集合；非 "default" schema 或远端非 success 状态时为空集合

        Raises:
            InvalidArgumentError: schema 为 None
        """
        if schema is None:
            raise InvalidArgumentError("schema is null")
        if schema != DEFAULT_SCHEMA:
            return set()
        snapshot = self.get_metadata()
        if not snapshot.is_success or snapshot.data is None:
            return set()
        return set(snapshot.data)

    def get_table(self, schema: str, table_name: str) -> Optional[PrometheusTable]:
        """
        获取 table 描述

        Returns:
            PrometheusTable；schema 未知或 metric 不存在时返回 None

        Raises:
            InvalidArgumentError: schema 或 table_name 为 None
        """
        if schema is None:
            raise InvalidArgumentError("schema is null")
        if table_name is None:
            raise InvalidArgumentError("table_name is null")
        if schema != DEFAULT_SCHEMA:
            return None

        # 只看 data，不检查 status
        metric_names = self.get_metadata().data
        if metric_names is None or table_name not in metric_names:
            logger.debug("Table not found: %s.%s", schema, table_name)
            return None
        return PrometheusTable(name=table_name, columns=self.columns)

    def close(self):
        self.http_client.close()

    def __enter__(self) -> "PrometheusClient":
        return self

    def __exit__(self, *exc_info):
        self.close()


_prometheus_client: Optional[PrometheusClient] = None
_prometheus_client_lock = threading.Lock()  # 线程安全锁


def get_prometheus_client() -> PrometheusClient:
    """
    获取全局单例客户端（线程安全）

    使用双重检查锁定模式，防止多线程/多协程并发时重复实例化。
    配置来自环境变量 (prometheus_metadata.core.config.settings)。
    """
    global _prometheus_client

    # 快速路径：已初始化则直接返回
    if _prometheus_client is not None:
        return _prometheus_client

    # 慢路径：使用锁保护初始化
    with _prometheus_client_lock:
        # 双重检查：防止等待锁期间其他线程已完成初始化
        if _prometheus_client is not None:
            return _prometheus_client

        logger.debug("Creating new PrometheusClient singleton instance")
        _prometheus_client = PrometheusClient.from_settings(settings)

    return _prometheus_client


def reset_prometheus_client() -> None:
    """关闭并重置单例（主要用于测试）"""
    global _prometheus_client
    with _prometheus_client_lock:
        if _prometheus_client is not None:
            _prometheus_client.close()
        _prometheus_client = None
