import logging
import time
import uuid
from typing import Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("geoguessr.requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"{request_id} unhandled error on {request.method} {request.url.path}"
            )
            response = JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"message": "Internal server error"},
            )

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"{request_id} {request.method} {request.url.path} "
            f"{response.status_code} {duration_ms:.2f}ms"
        )

        response.headers["X-Request-ID"] = request_id
        return response
