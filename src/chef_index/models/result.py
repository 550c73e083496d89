"""Result models — What the search and maintenance paths hand back to callers."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SearchResult(BaseModel):
    """Uniform search result, independent of the backend that produced it."""

    model_config = ConfigDict(frozen=True)

    offset: int = Field(ge=0, description="Offset of the first returned id")
    total_matches: int = Field(ge=0, description="Total number of matching documents")
    ids: list[str] = Field(default_factory=list, description="Document ids in backend order")


class MaintenanceResult(BaseModel):
    """Outcome of a direct index update (delete, commit)."""

    ok: bool = Field(description="Whether the backend accepted the update")
    operation: str = Field(description="Operation name, e.g. 'delete_search_db'")
    status_code: int | None = Field(default=None, description="HTTP status of the failing request, if any")
    error: str | None = Field(default=None, description="Failure description for logs")


class PingStatus(str, Enum):
    """Binary health signal for the search backend."""

    UP = "up"
    DOWN = "down"
