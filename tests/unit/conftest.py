import json

import pytest

from prometheus_metadata.core.config import PrometheusConfig
from prometheus_metadata.providers.prometheus import (
    JsonMetadataDecoder,
    PrometheusClient,
    SignatureTypeResolver,
)


class StubHttpClient:
    """按顺序返回预设响应体或抛出预设异常"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = 0

    def fetch(self, uri: str) -> bytes:
        self.calls += 1
        result = self.responses[min(self.calls, len(self.responses)) - 1]
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        pass


def create_metadata_body(status: str = "success", data=None) -> bytes:
    document = {"status": status}
    if data is not None:
        document["data"] = data
    return json.dumps(document).encode("utf-8")


@pytest.fixture
def make_stub_client():
    """创建使用 StubHttpClient 的 PrometheusClient"""

    def _make(*responses) -> PrometheusClient:
        return PrometheusClient(
            PrometheusConfig(prometheus_uri="http://prometheus.test:9090"),
            JsonMetadataDecoder(),
            SignatureTypeResolver(),
            http_client=StubHttpClient(*responses),
        )

    return _make
