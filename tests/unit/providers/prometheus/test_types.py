import pytest

from prometheus_metadata.providers.prometheus.types import SignatureTypeResolver
from prometheus_metadata.schemas.metadata import ColumnType


@pytest.fixture
def resolver():
    return SignatureTypeResolver()


def test_scalar_types(resolver):
    assert resolver.get_type("double") == ColumnType(signature="double")
    assert resolver.get_type("timestamp") == ColumnType(signature="timestamp")
    assert resolver.get_type("VARCHAR") == ColumnType(signature="varchar")


def test_map_type_normalized(resolver):
    """测试 map 类型签名规范化（空格、大小写）"""
    assert resolver.get_type("map(varchar, varchar)") == ColumnType(
        signature="map(varchar,varchar)"
    )
    assert str(resolver.get_type("MAP( varchar , double )")) == "map(varchar,double)"


def test_nested_map(resolver):
    assert (
        str(resolver.get_type("map(varchar,map(varchar,bigint))"))
        == "map(varchar,map(varchar,bigint))"
    )


@pytest.mark.parametrize("signature", ["decimal", "map(varchar)", "map()", "array(double)"])
def test_unknown_signature(resolver, signature):
    with pytest.raises(ValueError):
        resolver.get_type(signature)
