"""Unified error handling — SentinelError → JSON."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pkgsentinel.exceptions import ManifestParseError, PathNotFound, SentinelError

_STATUS_MAP: dict[type[SentinelError], int] = {
    PathNotFound: 404,
    ManifestParseError: 422,
}


async def _sentinel_error_handler(_request: Request, exc: SentinelError) -> JSONResponse:
    status = 500
    for cls in type(exc).__mro__:
        if cls in _STATUS_MAP:
            status = _STATUS_MAP[cls]
            break
    return JSONResponse(status_code=status, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SentinelError, _sentinel_error_handler)  # type: ignore[arg-type]
