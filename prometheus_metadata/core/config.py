from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PrometheusConfig(BaseModel):
    """客户端构造时使用的不可变配置"""

    model_config = ConfigDict(frozen=True)

    prometheus_uri: str = "http://localhost:9090"
    query_chunk_size_duration: str = "1d"
    max_query_range_duration: str = "21d"
    cache_duration: str = "30s"
    bearer_token_file: Optional[str] = None

    # HTTP 超时（秒）与最大尝试次数（1 表示不重试）
    http_timeout: float = Field(default=10.0, gt=0)
    fetch_max_attempts: int = Field(default=1, ge=1)


class Settings(BaseSettings):
    PROMETHEUS_URI: str = "http://localhost:9090"
    PROMETHEUS_QUERY_CHUNK_SIZE_DURATION: str = "1d"
    PROMETHEUS_MAX_QUERY_RANGE_DURATION: str = "21d"
    PROMETHEUS_CACHE_DURATION: str = "30s"
    PROMETHEUS_BEARER_TOKEN_FILE: str | None = None
    PROMETHEUS_HTTP_TIMEOUT: float = 10.0
    PROMETHEUS_FETCH_MAX_ATTEMPTS: int = 1

    # HTTP server
    HTTP_HOST: str = "0.0.0.0"
    HTTP_PORT: int = 8002

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    def to_prometheus_config(self) -> PrometheusConfig:
        return PrometheusConfig(
            prometheus_uri=self.PROMETHEUS_URI,
            query_chunk_size_duration=self.PROMETHEUS_QUERY_CHUNK_SIZE_DURATION,
            max_query_range_duration=self.PROMETHEUS_MAX_QUERY_RANGE_DURATION,
            cache_duration=self.PROMETHEUS_CACHE_DURATION,
            bearer_token_file=self.PROMETHEUS_BEARER_TOKEN_FILE,
            http_timeout=self.PROMETHEUS_HTTP_TIMEOUT,
            fetch_max_attempts=self.PROMETHEUS_FETCH_MAX_ATTEMPTS,
        )


settings = Settings()
