import logging
from pathlib import Path
from typing import Optional

import httpx

from prometheus_metadata.core.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def _mask_token(token: str, visible_chars: int = 4) -> str:
    """对 token 进行脱敏处理，仅显示前几个字符"""
    if not token or len(token) <= visible_chars:
        return "***"
    return f"{token[:visible_chars]}***"


class BearerTokenLoader:
    """
    从文件读取 bearer token

    每次调用都会重新读取文件，token 轮换后无需重启。
    """

    def __init__(self, token_file: Optional[str] = None):
        self.token_file = token_file

    def load(self) -> Optional[str]:
        """
        读取 token

        Returns:
            token 字符串；未配置 token 文件时返回 None

        Raises:
            NotFoundError: 文件不存在或不可读
        """
        if self.token_file is None:
            return None

        try:
            token = Path(self.token_file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read bearer token file %s: %s", self.token_file, e)
            raise NotFoundError(self.token_file) from e

        # 去掉文件末尾换行，否则无法作为 header 值发送
        token = token.strip()
        logger.debug("Loaded bearer token %s from %s", _mask_token(token), self.token_file)
        return token


class BearerTokenAuth(httpx.Auth):
    """
    Prometheus 认证
    每个请求发送前读取 token 并注入 Authorization 头
    """

    def __init__(self, loader: BearerTokenLoader):
        self.loader = loader

    def auth_flow(self, request: httpx.Request):
        token = self.loader.load()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        yield request
