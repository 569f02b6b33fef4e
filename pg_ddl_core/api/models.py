"""
Pydantic models for API requests and responses.
"""

from typing import List, Literal

from pydantic import BaseModel, Field


class CompareRequest(BaseModel):
    """Request model for comparing two environment directories."""
    left_dir: str = Field(..., description="Source environment directory", examples=["sql/dev"])
    right_dir: str = Field(..., description="Target environment directory", examples=["sql/prod"])
    left_name: str = Field("dev", description="Label of the source environment")
    right_name: str = Field("prod", description="Label of the target environment")
    with_diff: bool = Field(True, description="Include rendered line diffs for modified objects")


class CompareManyRequest(BaseModel):
    """Request model for a multi-environment comparison."""
    sql_root: str = Field(..., description="Directory holding one folder per environment", examples=["sql"])
    envs: List[str] = Field(..., min_length=2, description="Environment names", examples=[["dev", "stage", "prod"]])


class MigrateRequest(CompareRequest):
    """Request model for migration and rollback planning."""
    with_diff: bool = Field(False, description="Include rendered line diffs for modified objects")
    output_format: Literal["sql", "json"] = Field("sql", description="Output format: sql or json")


class DiffRequest(BaseModel):
    """Request model for a standalone line diff of two DDL texts."""
    left: str = Field(..., description="Left (source) DDL text")
    right: str = Field(..., description="Right (target) DDL text")
    left_label: str = Field("DEV", description="Label for lines only on the left")
    right_label: str = Field("PROD", description="Label for lines only on the right")
    context: int = Field(2, ge=0, description="Context lines around each change")


class DiffResponse(BaseModel):
    identical: bool
    lines: List[str]


class ReportRequest(CompareRequest):
    format: Literal["html", "markdown"] = Field("html", description="Report format")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., examples=["healthy"])
    timestamp: str
    version: str = Field(..., examples=["0.2.0"])


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., examples=["Directory not found"])
    path: str = Field(..., examples=["sql/dev"])
