"""Response envelope shared by every endpoint.

    {"code": 0, "message": "Negotiation created",
     "data": {...},                # null on error
     "error_kind": null,           # validation | not_found | permission | state | expired | auth
     "timestamp": "2026-09-01T09:00:00+00:00",
     "request_id": "req_a1b2c3d4e5f6"}

``code`` is 0 on success, otherwise the AppError code.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    error_kind: str | None = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def success_response(data: Any = None) -> ApiResponse:
    return ApiResponse(code=0, message="success", data=data)


def error_response(code: int, message: str, kind: str | None = None) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None, error_kind=kind)


def request_success(request: Any, data: Any = None, message: str = "success") -> ApiResponse:
    """success_response carrying the request_id injected by RequestLogMiddleware."""
    resp = success_response(data)
    resp.message = message
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
