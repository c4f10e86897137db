"""HTTP plumbing shared by the storefront routers.

The caller's identity is resolved upstream (session or credential check) and
forwarded in the ``X-User-Id`` header; the routers trust whatever arrives.
"""

from typing import Annotated

import structlog
from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from shared.exceptions import StorefrontError

logger = structlog.get_logger(__name__)


def current_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return x_user_id


UserId = Annotated[str, Depends(current_user_id)]


def register_exception_handlers(app: FastAPI) -> None:
    """Map storefront error kinds and storage failures to JSON responses."""

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            "Storage failure",
            path=request.url.path,
            error=type(exc).__name__,
        )
        return JSONResponse(
            status_code=503,
            content={
                "code": "storage_unavailable",
                "message": "Storage is temporarily unavailable",
                "retryable": True,
            },
        )
