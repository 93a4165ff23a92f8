import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from shared.core.logger import AppLogger

logger = AppLogger("http")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, duration and caller for every request."""

    async def dispatch(self, request: Request, call_next: Callable):
        # Skip docs/openapi endpoints
        if request.url.path.startswith(("/openapi", "/docs", "/redoc")):
            return await call_next(request)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("HTTP Request Failed", {
                "method": request.method,
                "url": request.url.path,
                "statusCode": 500,
                "duration": round((time.perf_counter() - start) * 1000, 2),
                "userId": getattr(request.state, "user_id", None),
                "error": str(e),
            })
            raise

        meta = {
            "method": request.method,
            "url": request.url.path,
            "statusCode": response.status_code,
            "duration": round((time.perf_counter() - start) * 1000, 2),
            "userId": getattr(request.state, "user_id", None),
        }
        if response.status_code >= 400:
            logger.error("HTTP Request Failed", meta)
        else:
            logger.info("HTTP Request Success", meta)

        return response
