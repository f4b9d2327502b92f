"""
HTTP API - 以 REST 接口暴露 Prometheus 元数据

启动方式:
    python -m prometheus_metadata.http_server

API 端点:
    GET /health
    GET /schemas
    GET /schemas/{schema}/tables
    GET /schemas/{schema}/tables/{table}
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import List

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from prometheus_metadata.core.config import settings
from prometheus_metadata.core.exceptions import (
    InvalidArgumentError,
    MetadataDecodeError,
    NotFoundError,
    PrometheusClientError,
    RemoteError,
    TransportIOError,
)
from prometheus_metadata.core.log_config import configure_logging
from prometheus_metadata.providers.prometheus import (
    PrometheusClient,
    get_prometheus_client,
    reset_prometheus_client,
)

logger = logging.getLogger(__name__)


class ColumnInfo(BaseModel):
    name: str
    type: str


class SchemaListResponse(BaseModel):
    schemas: List[str]


class TableListResponse(BaseModel):
    schema_name: str
    tables: List[str]
    count: int


class TableResponse(BaseModel):
    schema_name: str
    name: str
    columns: List[ColumnInfo]


def _to_http_exception(exc: PrometheusClientError) -> HTTPException:
    """将客户端异常映射为 HTTP 错误"""
    if isinstance(exc, InvalidArgumentError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, RemoteError):
        return HTTPException(status_code=502, detail=str(exc))
    if isinstance(exc, TransportIOError):
        return HTTPException(status_code=503, detail="Prometheus 服务不可达")
    if isinstance(exc, (NotFoundError, MetadataDecodeError)):
        return HTTPException(status_code=500, detail=str(exc))
    return HTTPException(status_code=500, detail="系统内部错误")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("Starting Prometheus metadata HTTP API")
    yield
    logger.info("Shutting down Prometheus metadata HTTP API")
    reset_prometheus_client()


app = FastAPI(
    title="Prometheus Metadata HTTP API",
    description="以 schema / table 形式暴露 Prometheus metric 元数据",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
def health_check():
    """健康检查接口"""
    return {"status": "healthy", "service": "prometheus-metadata"}


@app.get("/schemas", response_model=SchemaListResponse)
def list_schemas(client: PrometheusClient = Depends(get_prometheus_client)):
    return SchemaListResponse(schemas=sorted(client.get_schema_names()))


@app.get("/schemas/{schema}/tables", response_model=TableListResponse)
def list_tables(schema: str, client: PrometheusClient = Depends(get_prometheus_client)):
    try:
        tables = sorted(client.get_table_names(schema))
    except PrometheusClientError as e:
        logger.error("Failed to list tables for schema %s: %s", schema, e)
        raise _to_http_exception(e)
    return TableListResponse(schema_name=schema, tables=tables, count=len(tables))


@app.get("/schemas/{schema}/tables/{table}", response_model=TableResponse)
def describe_table(
    schema: str, table: str, client: PrometheusClient = Depends(get_prometheus_client)
):
    try:
        result = client.get_table(schema, table)
    except PrometheusClientError as e:
        logger.error("Failed to describe table %s.%s: %s", schema, table, e)
        raise _to_http_exception(e)

    if result is None:
        raise HTTPException(status_code=404, detail=f"Table not found: {schema}.{table}")

    return TableResponse(
        schema_name=schema,
        name=result.name,
        columns=[ColumnInfo(name=c.name, type=str(c.type)) for c in result.columns],
    )


def main():
    """启动 HTTP 服务"""
    import uvicorn

    log_file = configure_logging(settings.LOG_LEVEL)
    logger.info("Logging configured. Log file: %s", log_file.absolute())

    # 强制将 stdout 重定向到 stderr，防止任何库（如 uvicorn）污染 stdout
    original_stdout = sys.stdout
    sys.stdout = sys.stderr

    logger.info(
        "Starting HTTP server on http://%s:%d", settings.HTTP_HOST, settings.HTTP_PORT
    )

    try:
        # log_config=None: 继承上面配置好的 logging
        uvicorn.run(
            "prometheus_metadata.http_server:app",
            host=settings.HTTP_HOST,
            port=settings.HTTP_PORT,
            reload=False,
            log_config=None,
        )
    finally:
        sys.stdout = original_stdout


if __name__ == "__main__":
    main()
