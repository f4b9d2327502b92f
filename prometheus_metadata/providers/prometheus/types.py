import logging
from typing import Any, Protocol

from prometheus_metadata.schemas.metadata import ColumnType

logger = logging.getLogger(__name__)

# 列类型签名
LABELS_TYPE_SIGNATURE = "map(varchar,varchar)"
TIMESTAMP_TYPE_SIGNATURE = "timestamp"
VALUE_TYPE_SIGNATURE = "double"

_SCALAR_TYPES = frozenset(["varchar", "double", "bigint", "boolean", "timestamp"])


class TypeResolver(Protocol):
    """由查询引擎提供：类型签名 -> 引擎内部类型"""

    def get_type(self, signature: str) -> Any: ...


class SignatureTypeResolver:
    """
    默认类型解析器

    支持标量类型和 map(K,V)，返回规范化签名的 ColumnType。
    """

    def get_type(self, signature: str) -> ColumnType:
        normalized = self._normalize(signature)
        logger.debug("Resolved type signature %r -> %s", signature, normalized)
        return ColumnType(signature=normalized)

    def _normalize(self, signature: str) -> str:
        text = "".join(signature.split()).lower()
        if text in _SCALAR_TYPES:
            return text

        if text.startswith("map(") and text.endswith(")"):
            inner = text[len("map(") : -1]
            key, value = self._split_map_arguments(inner, signature)
            return f"map({self._normalize(key)},{self._normalize(value)})"

        raise ValueError(f"Unknown type signature: {signature!r}")

    @staticmethod
    def _split_map_arguments(inner: str, signature: str) -> tuple[str, str]:
        # 按顶层逗号拆分，嵌套的 map(...) 内部逗号不算
        depth = 0
        for i, ch in enumerate(inner):
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
            elif ch == "," and depth == 0:
                return inner[:i], inner[i + 1 :]
        raise ValueError(f"Invalid map type signature: {signature!r}")
