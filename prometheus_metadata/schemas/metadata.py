from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

SUCCESS_STATUS = "success"


class MetadataSnapshot(BaseModel):
    """
    /api/v1/label/__name__/values 的响应文档
    成功时: {"status": "success", "data": ["up", ...]}
    失败时: {"status": "error", "errorType": "...", "error": "..."}
    """

    status: str
    data: Optional[Tuple[str, ...]] = None
    error_type: Optional[str] = Field(default=None, alias="errorType")
    error: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)

    # Allow extra fields for forward compatibility
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @property
    def is_success(self) -> bool:
        return self.status == SUCCESS_STATUS


class ColumnType(BaseModel):
    model_config = ConfigDict(frozen=True)

    signature: str

    def __str__(self) -> str:
        return self.signature


class PrometheusColumn(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    type: Any


class PrometheusTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    columns: Tuple[PrometheusColumn, ...]
