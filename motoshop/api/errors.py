"""Error envelope for API responses."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


@contextmanager
def failure_boundary(message: str) -> Iterator[None]:
    """Turn unexpected failures inside the block into a 500 with ``message``.

    ``HTTPException`` raised inside (validation, not found) passes through.
    """

    try:
        yield
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception(message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": message, "details": str(exc)},
        ) from exc


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every ``HTTPException`` as ``{"error": ...}``; dict details pass as-is."""

    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)
