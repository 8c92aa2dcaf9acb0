"""JSON response helpers shared by the knowledge-base routers."""

from typing import Any, Optional

from fastapi import Header
from fastapi.responses import JSONResponse

from nutriplan.errors import ErrorCode, status_for
from nutriplan.schemas.common import CamelModel


def respond(model: CamelModel, status_code: Optional[int] = None) -> JSONResponse:
    if status_code is None:
        status_code = status_for(getattr(model, "error", None))
    return JSONResponse(status_code=status_code, content=model.to_json())


def error_response(error: ErrorCode, message: str, **extra: Any) -> JSONResponse:
    body = {"success": False, "error": error.value, "message": message, **extra}
    return JSONResponse(status_code=status_for(error), content=body)


def is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def optional_user_id(x_user_id: Optional[int] = Header(default=None)) -> Optional[int]:
    """Caller identity supplied by the upstream auth layer as X-User-Id; absent for guests."""
    return x_user_id
