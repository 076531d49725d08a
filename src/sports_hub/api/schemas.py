from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ApiResult(BaseModel):
    name: str
    status: str
    duration: int | None = None
    error: str | None = None


class ProgressBody(BaseModel):
    total: int
    completed: int
    percentage: int
    current_task: str
    state: str
    elapsed_time: int = Field(description="Milliseconds since the session started.")
    estimated_remaining: int = Field(description="Milliseconds, best guess.")
    api_results: list[ApiResult]
    errors: list[str]


class ProgressResponse(BaseModel):
    session_id: str
    progress: ProgressBody


class FetchResponse(BaseModel):
    success: bool
    data: dict[str, Any]
    source: str
    cached_at: str
    processing_time: int
    session_id: str | None = None
    progress: ProgressBody | None = None


class ErrorResponse(BaseModel):
    error: str


class CacheStatsResponse(BaseModel):
    memory_entries: int
    database_entries: int
    hits: int
    misses: int
    hit_rate: float
    storage_size: str
