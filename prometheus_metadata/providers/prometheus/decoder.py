import json
import logging
from typing import Any, Mapping, Protocol

logger = logging.getLogger(__name__)


class MetadataDecoder(Protocol):
    """将响应体解码为通用的 key/value 结构"""

    def decode(self, body: bytes) -> Mapping[str, Any]: ...


class JsonMetadataDecoder:
    """默认解码器：UTF-8 JSON 对象"""

    def decode(self, body: bytes) -> Mapping[str, Any]:
        document = json.loads(body)
        if not isinstance(document, dict):
            raise ValueError(
                f"Expected a JSON object, got {type(document).__name__}"
            )
        logger.debug("Decoded metadata document with keys: %s", list(document.keys()))
        return document
