# app/core/responses.py
"""
Single response envelope used by every endpoint:

    {"status": "success" | "fail" | "error", "code": int, "message": str | None, "data": ... }
"""
from typing import Any

from fastapi import status as http_status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def status_text(code: int) -> str:
    if code >= 500:
        return "error"
    if code >= 400:
        return "fail"
    return "success"


def envelope(data: Any = None, *, code: int = http_status.HTTP_200_OK, message: str | None = None) -> JSONResponse:
    body = {
        "status": status_text(code),
        "code": code,
        "message": message,
        "data": data,
    }
    return JSONResponse(status_code=code, content=jsonable_encoder(body))


def created(data: Any = None, message: str | None = None) -> JSONResponse:
    return envelope(data, code=http_status.HTTP_201_CREATED, message=message)
