import httpx
import pytest

from prometheus_metadata.core.auth import BearerTokenAuth, BearerTokenLoader, _mask_token
from prometheus_metadata.core.exceptions import NotFoundError


def test_loader_without_token_file():
    """测试未配置 token 文件时返回 None"""
    loader = BearerTokenLoader()
    assert loader.load() is None


def test_loader_reads_token(tmp_path):
    """测试读取 token 文件"""
    token_file = tmp_path / "token"
    token_file.write_text("secret-token\n", encoding="utf-8")

    loader = BearerTokenLoader(str(token_file))
    assert loader.load() == "secret-token"


def test_loader_rereads_on_every_call(tmp_path):
    """测试每次调用都重新读取文件（支持 token 轮换）"""
    token_file = tmp_path / "token"
    token_file.write_text("t1", encoding="utf-8")
    loader = BearerTokenLoader(str(token_file))
    assert loader.load() == "t1"

    token_file.write_text("t2", encoding="utf-8")
    assert loader.load() == "t2"


def test_loader_missing_file(tmp_path):
    """测试 token 文件不存在"""
    missing = tmp_path / "missing-token"
    loader = BearerTokenLoader(str(missing))

    with pytest.raises(NotFoundError) as exc_info:
        loader.load()

    assert str(missing) in str(exc_info.value)
    assert exc_info.value.path == str(missing)


def test_loader_directory_is_unreadable(tmp_path):
    """测试 token 路径是目录"""
    loader = BearerTokenLoader(str(tmp_path))
    with pytest.raises(NotFoundError):
        loader.load()


def test_auth_flow_sets_header(tmp_path):
    token_file = tmp_path / "token"
    token_file.write_text("abc123", encoding="utf-8")
    auth = BearerTokenAuth(BearerTokenLoader(str(token_file)))

    request = httpx.Request("GET", "http://prometheus:9090/api/v1/label/__name__/values")
    flow = auth.auth_flow(request)
    authed = next(flow)

    assert authed.headers["Authorization"] == "Bearer abc123"


def test_auth_flow_without_token():
    auth = BearerTokenAuth(BearerTokenLoader())

    request = httpx.Request("GET", "http://prometheus:9090/")
    authed = next(auth.auth_flow(request))

    assert "Authorization" not in authed.headers


def test_mask_token():
    assert _mask_token("abcdefgh") == "abcd***"
    assert _mask_token("abc") == "***"
    assert _mask_token("") == "***"
