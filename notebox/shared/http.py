# notebox/shared/http.py
"""Response envelope shared by every router: `{"ok": true, "data": ...}` on
success, `{"ok": false, "error": {code, message, details}}` under `detail`
on failure."""
from typing import Any, Optional

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorInfo(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


def error_body(message: str, code: str, details: Optional[Any] = None) -> dict:
    return {"ok": False, "error": ErrorInfo(code=code, message=message, details=details).model_dump()}


def ok(data: Any = None, **extra) -> dict:
    return {"ok": True, "data": data, **extra}


def err(message: str, code: str = "bad_request", status: int = 400, details: Optional[Any] = None):
    # always raises, so routes can `return err(...)` to short-circuit
    raise HTTPException(status_code=status, detail=error_body(message, code, details))


async def invalid_input_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = jsonable_encoder(exc.errors(), custom_encoder={ValueError: str})
    return JSONResponse(status_code=422, content={"detail": error_body("invalid request", "invalid_input", details)})
