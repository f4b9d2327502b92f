"""
时长字符串解析

支持 Prometheus 风格的时长写法，例如 "30s"、"1d"、"3w"、"1h30m"。
单位区分大小写: y(365天), w, d, h, m, s, ms
"""

import logging
import re

from prometheus_metadata.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# 单位 -> 毫秒
_UNIT_MILLIS = {
    "y": 365 * 24 * 60 * 60 * 1000,
    "w": 7 * 24 * 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
    "h": 60 * 60 * 1000,
    "m": 60 * 1000,
    "s": 1000,
    "ms": 1,
}

# "ms" 必须排在 "m" 前面，否则 "500ms" 会被拆成 "500m" + "s"
_TERM = r"(\d+)(ms|y|w|d|h|m|s)"
_DURATION_RE = re.compile(rf"^(?:{_TERM})+$")
_TERM_RE = re.compile(_TERM)


def to_seconds(duration: str) -> int:
    """
    将时长字符串转换为秒数

    Args:
        duration: 时长字符串，如 "1d"、"21d"、"30s"

    Returns:
        秒数（毫秒部分向下取整）

    Raises:
        ConfigurationError: 无法解析的时长
    """
    if not isinstance(duration, str):
        raise ConfigurationError(f"Invalid duration: {duration!r}")

    text = duration.strip()
    if not _DURATION_RE.match(text):
        raise ConfigurationError(f"Invalid duration: {duration!r}")

    millis = 0
    for magnitude, unit in _TERM_RE.findall(text):
        millis += int(magnitude) * _UNIT_MILLIS[unit]

    seconds = millis // 1000
    logger.debug("Parsed duration %r -> %d seconds", duration, seconds)
    return seconds
