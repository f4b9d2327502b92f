import logging
from typing import Optional

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from prometheus_metadata.core.auth import BearerTokenAuth, BearerTokenLoader
from prometheus_metadata.core.exceptions import RemoteError, TransportIOError

logger = logging.getLogger(__name__)

# HTTP 请求超时配置（秒）
HTTP_TIMEOUT = 10.0


class PrometheusHttpClient:
    """
    Prometheus HTTP 同步客户端

    特性:
    - 每次请求从文件加载 bearer token (Authorization: Bearer <token>)
    - 错误分类: 非 2xx -> RemoteError，网络层失败 -> TransportIOError
    - 可选的网络错误重试（max_attempts > 1 时启用，指数退避）
    """

    RETRY_MIN_WAIT = 1  # 最小等待时间（秒）
    RETRY_MAX_WAIT = 10  # 最大等待时间（秒）

    def __init__(
        self,
        bearer_token_file: Optional[str] = None,
        timeout: float = HTTP_TIMEOUT,
        max_attempts: int = 1,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.max_attempts = max_attempts
        self.client = httpx.Client(
            auth=BearerTokenAuth(BearerTokenLoader(bearer_token_file)),
            timeout=httpx.Timeout(timeout),
            trust_env=False,  # 禁用环境变量代理
            follow_redirects=True,  # 跟随反向代理的 http->https 或路径重定向
            transport=transport,
        )
        logger.debug(
            "PrometheusHttpClient initialized: timeout=%.1f, max_attempts=%d, token_file=%s",
            timeout,
            max_attempts,
            bearer_token_file,
        )

    def _get_retry_decorator(self):
        """获取重试装饰器配置，只重试网络层错误"""
        return retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(
                multiplier=1, min=self.RETRY_MIN_WAIT, max=self.RETRY_MAX_WAIT
            ),
            retry=retry_if_exception_type(TransportIOError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def fetch(self, uri: str) -> bytes:
        """
        GET 请求并返回响应体

        Args:
            uri: 完整请求地址

        Returns:
            响应体字节

        Raises:
            NotFoundError: token 文件不可读（请求不会发出）
            RemoteError: 非 2xx 响应
            TransportIOError: 连接失败、超时等网络层错误
        """

        @self._get_retry_decorator()
        def _do_fetch() -> bytes:
            logger.debug("Making GET request to %s", uri)
            try:
                response = self.client.get(uri)
            except httpx.TransportError as e:
                logger.error("Request to %s failed (network error): %s", uri, e)
                raise TransportIOError(f"Request to {uri} failed: {e}") from e

            if not response.is_success:
                logger.error(
                    "HTTP error %d from %s: %s",
                    response.status_code,
                    uri,
                    response.text[:200],
                )
                raise RemoteError(response.status_code, response.reason_phrase)

            logger.debug("Response status: %d from %s", response.status_code, uri)
            return response.content

        return _do_fetch()

    def close(self):
        """关闭客户端连接"""
        logger.debug("Closing PrometheusHttpClient connection")
        self.client.close()

    def __enter__(self) -> "PrometheusHttpClient":
        return self

    def __exit__(self, *exc_info):
        self.close()
