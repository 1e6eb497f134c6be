import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cryptotrack.schemas import ErrorCode, ErrorResponse

logger = logging.getLogger("cryptotrack.errors")

_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.VALIDATION_ERROR,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_409_CONFLICT: ErrorCode.CONFLICT,
}


def http_error(code: ErrorCode, message: str, http_status=status.HTTP_400_BAD_REQUEST) -> HTTPException:
    detail = ErrorResponse(code=code, message=message)
    return HTTPException(status_code=http_status, detail=detail.model_dump(mode="json"))


def not_found(what: str) -> HTTPException:
    return http_error(ErrorCode.NOT_FOUND, f"{what} not found", status.HTTP_404_NOT_FOUND)


def envelope_from_http_exception(exc: StarletteHTTPException) -> ErrorResponse:
    d = exc.detail
    if isinstance(d, dict) and "code" in d and "message" in d:
        return ErrorResponse(**d)  # already our shape
    fallback = ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.CLIENT_ERROR
    code = _STATUS_CODES.get(exc.status_code, fallback)
    return ErrorResponse(code=code, message=str(d))


def validation_message(exc: RequestValidationError) -> str:
    """Turn pydantic errors into 'Validation error: amount: Field required; ...'."""
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {err.get('msg', 'invalid value')}")
    return "Validation error: " + "; ".join(parts)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    body = envelope_from_http_exception(exc)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"), headers=exc.headers)


async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    body = ErrorResponse(code=ErrorCode.VALIDATION_ERROR, message=validation_message(exc))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump(mode="json"))


async def _unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    body = ErrorResponse(code=ErrorCode.INTERNAL_ERROR, message="Internal server error")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump(mode="json"))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
