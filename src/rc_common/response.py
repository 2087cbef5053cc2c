"""Wire conventions shared by every router.

Success bodies are plain JSON objects keyed by resource name, e.g.
    {"message": "...", "payment": {...}}
    {"payments": [...], "pagination": {"page": 1, "limit": 10, "total": 15, "pages": 2}}

Error bodies always carry a single human-readable message:
    {"error": "...", "code": 3001, "request_id": "req_..."}
Validation failures add the per-field list:
    {"error": "Validation failed", "code": 9001, "errors": [{"field": ..., "message": ...}]}

Field names are camelCase on the wire, snake_case in Python.
"""

import math
import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for request/response schemas: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


def page_offset(page: int, limit: int) -> int:
    """Row offset for 1-based page numbers."""
    return (page - 1) * limit


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    error: str
    code: int
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")
    errors: list[FieldError] | None = None


def error_response(
    code: int,
    message: str,
    request_id: str | None = None,
    errors: list[FieldError] | None = None,
) -> dict[str, Any]:
    resp = ErrorResponse(error=message, code=code, errors=errors)
    if request_id:
        resp.request_id = request_id
    return resp.model_dump(exclude_none=True)


def success_response(message: str | None = None, **payload: Any) -> dict[str, Any]:
    body: dict[str, Any] = {}
    if message is not None:
        body["message"] = message
    for key, value in payload.items():
        body[key] = value.to_json() if isinstance(value, CamelModel) else value
    return body
