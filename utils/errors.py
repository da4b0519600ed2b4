"""
Error taxonomy shared by the crud layer and the HTTP boundary.

crud functions raise these; main.py turns them into terse JSON bodies of the
form {"error": "<message>"} with the matching status code.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("crowdsolve.errors")


class ForumError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(ForumError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(ForumError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(ForumError):
    status_code = 404
    default_message = "Not found"


class InvalidInput(ForumError):
    status_code = 400
    default_message = "Invalid input"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError, method: str = "POST") -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    first = errors[0]
    if first.get("type") == "extra_forbidden":
        return "Invalid updates" if method == "PATCH" else "Invalid input"
    if first.get("type") == "value_error":
        return str(first.get("msg", "")).replace("Value error, ", "", 1)
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    msg = first.get("msg", "Invalid input")
    return f"{field}: {msg}" if field else msg


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ForumError)
    async def forum_error_handler(request: Request, exc: ForumError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return error_response(400, _validation_message(exc, request.method))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(500, "Internal server error")
