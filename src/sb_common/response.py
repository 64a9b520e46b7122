"""Unified API response wrapper.

All API endpoints return this format:
{
    "success": true,
    "code": 0,              // 0=success, non-0=error code
    "error": null,          // stable error kind on failure, e.g. "INSUFFICIENT_FUNDS"
    "message": "success",
    "data": { ... },        // null on error (or validation details)
    "timestamp": "...",
    "request_id": "..."
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    success: bool = True
    code: int = 0
    error: str | None = None
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def success_response(data: Any = None, message: str = "success") -> ApiResponse:
    return ApiResponse(success=True, code=0, message=message, data=data)


def error_response(code: int, error: str, message: str, data: Any = None) -> ApiResponse:
    return ApiResponse(success=False, code=code, error=error, message=message, data=data)


def respond(request: Request, data: Any = None, message: str = "success") -> ApiResponse:
    """Wrap ``data`` and stamp the request_id injected by RequestLogMiddleware."""
    resp = success_response(data, message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
