from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.core.logger import AppLogger
from shared.helpers.json_response_helper import error_response

logger = AppLogger("exceptions")


def _validation_errors(exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        # drop the leading "body"/"query"/"path" location
        location = [str(part) for part in err.get("loc", ())[1:]]
        errors.append({
            "field": ".".join(location) or None,
            "message": err.get("msg"),
        })
    return errors


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            content=error_response(str(exc.detail), exc.status_code),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            content=error_response(
                "Validation failed", 422, errors=_validation_errors(exc)),
            status_code=422,
        )

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception", {
            "method": request.method,
            "path": request.url.path,
            "error": repr(exc),
        }, exc_info=True)

        return JSONResponse(
            content=error_response("Internal server error", 500),
            status_code=500,
        )
