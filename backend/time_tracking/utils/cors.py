from typing import Any, Iterable

from fastapi import Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def cors_headers(methods: Iterable[str]) -> dict:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": ", ".join(methods),
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Max-Age": "86400",  # 24 hours
    }


def preflight(methods: Iterable[str]) -> Response:
    """Empty 200 answer to an OPTIONS request."""
    return Response(status_code=200, headers=cors_headers(methods))


def cors_json(content: Any, methods: Iterable[str], status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        content=jsonable_encoder(content),
        status_code=status_code,
        headers=cors_headers(methods),
    )
