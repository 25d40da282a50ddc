"""CORS-aware JSON and preflight responses for the request handlers."""

from __future__ import annotations

from typing import Any

from fastapi import Response, status
from fastapi.responses import JSONResponse

from settings import CorsPolicy

__all__ = ["cors_json", "cors_preflight"]


def cors_json(cors: CorsPolicy, content: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """JSON response carrying the handler CORS headers."""

    return JSONResponse(content=content, status_code=status_code, headers=cors.headers())


def cors_preflight(cors: CorsPolicy) -> Response:
    """Empty preflight answer with the CORS headers."""

    return Response(status_code=status.HTTP_200_OK, headers=cors.headers())
