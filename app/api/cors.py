"""Permissive CORS headers shared by the function-style endpoints."""
from __future__ import annotations

from typing import Any

from fastapi import Response
from fastapi.responses import JSONResponse

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
}


def preflight_response() -> Response:
    """Empty 200 answer to an ``OPTIONS`` pre-flight request."""
    return Response(status_code=200, headers=CORS_HEADERS)


def json_response(payload: dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=payload, status_code=status_code, headers=CORS_HEADERS)
