"""Exception handlers for member errors."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from members_api.domain.errors import MemberError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register handlers that turn member errors into HTTP responses."""

    @app.exception_handler(MemberError)
    async def member_error_handler(request: Request, exc: MemberError) -> JSONResponse:
        logger.warning(
            "Member request failed: %s",
            exc.message,
            extra={"path": request.url.path, "status": exc.http_status},
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())
