"""
MCP Server - Prometheus 元数据工具接口

提供给 LLM 调用的工具集，用于浏览 Prometheus 中的 metric。

工具列表:
- list_schemas: 列出可用 schema（固定为 "default"）
- list_tables: 列出 schema 下的 table（即 metric 名称）
- describe_table: 获取 table 的列结构
"""

import asyncio
import json
import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from prometheus_metadata.core.config import settings
from prometheus_metadata.core.exceptions import (
    PrometheusClientError,
    RemoteError,
    TransportIOError,
)
from prometheus_metadata.core.log_config import configure_logging
from prometheus_metadata.providers.prometheus import (
    DEFAULT_SCHEMA,
    get_prometheus_client,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("Prometheus Metadata")


def _error_response(
    operation: str,
    error_msg: str,
    error_code: Optional[str] = None,
) -> str:
    """
    生成统一的错误响应 JSON

    Args:
        operation: 操作名称，如 "获取 table 列表"
        error_msg: 错误信息
        error_code: 错误码（可选），如 "ERR_REMOTE"、"ERR_NETWORK"
    """
    response = {
        "success": False,
        "error": {
            "message": f"{operation}失败: {error_msg}",
        },
    }
    if error_code:
        response["error"]["code"] = error_code
    return json.dumps(response, ensure_ascii=False, indent=2)


def _success_response(data: dict, message: Optional[str] = None) -> str:
    response = {
        "success": True,
        "data": data,
    }
    if message:
        response["message"] = message
    return json.dumps(response, ensure_ascii=False, indent=2)


def _error_code(exc: PrometheusClientError) -> str:
    if isinstance(exc, RemoteError):
        return "ERR_REMOTE"
    if isinstance(exc, TransportIOError):
        return "ERR_NETWORK"
    return "ERR_CLIENT"


@mcp.tool()
async def list_schemas() -> str:
    """
    列出所有可用的 schema。

    Prometheus 只有一个 schema: "default"。

    Returns:
        JSON 格式的 schema 列表
    """
    client = get_prometheus_client()
    schemas = sorted(client.get_schema_names())
    return _success_response({"count": len(schemas), "schemas": schemas})


@mcp.tool()
async def list_tables(schema: str = DEFAULT_SCHEMA) -> str:
    """
    列出 schema 下的所有 table（Prometheus metric 名称）。

    Args:
        schema: schema 名称，默认为 "default"

    Returns:
        JSON 格式的 table 列表；Prometheus 不可用时返回错误信息。

    Examples:
        list_tables()
        list_tables(schema="default")
    """
    try:
        logger.info("Listing tables for schema=%s", schema)
        client = get_prometheus_client()
        # 首次调用或缓存过期时会发起阻塞的 HTTP 请求
        tables = sorted(await asyncio.to_thread(client.get_table_names, schema))
        return _success_response(
            {"schema": schema, "count": len(tables), "tables": tables}
        )
    except PrometheusClientError as e:
        logger.error("Failed to list tables: %s", e, exc_info=True)
        return _error_response("获取 table 列表", str(e), _error_code(e))


@mcp.tool()
async def describe_table(table: str, schema: str = DEFAULT_SCHEMA) -> str:
    """
    获取 table 的列结构。

    所有 Prometheus table 的列相同: labels (map), timestamp, value (double)。

    Args:
        table: table 名称（metric 名称），如 "up"
        schema: schema 名称，默认为 "default"

    Returns:
        JSON 格式的 table 描述；table 不存在时返回错误信息。
    """
    try:
        logger.info("Describing table %s.%s", schema, table)
        client = get_prometheus_client()
        result = await asyncio.to_thread(client.get_table, schema, table)
        if result is None:
            return _error_response(
                "获取 table 结构", f"table 不存在: {schema}.{table}", "ERR_NOT_FOUND"
            )
        return _success_response(
            {
                "schema": schema,
                "name": result.name,
                "columns": [
                    {"name": c.name, "type": str(c.type)} for c in result.columns
                ],
            }
        )
    except PrometheusClientError as e:
        logger.error("Failed to describe table: %s", e, exc_info=True)
        return _error_response("获取 table 结构", str(e), _error_code(e))


def main():
    """
    MCP Server 入口点
    """
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting MCP Server (Prometheus Metadata)")
    logger.info("Log level: %s", settings.LOG_LEVEL)

    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("MCP Server stopped by user")
    except Exception as e:
        logger.critical("MCP Server crashed: %s", e, exc_info=True)
        raise


if __name__ == "__main__":
    main()
