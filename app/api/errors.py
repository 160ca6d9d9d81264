"""Exception handlers: translate every failure into the {errors, status: "fail"} envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppError
from app.schemas.envelope import FieldError, fail_content

logger = logging.getLogger(__name__)

# Field category reported for plain HTTP errors, by status code.
HTTP_ERROR_FIELDS = {
    status.HTTP_401_UNAUTHORIZED: "authentication",
    status.HTTP_403_FORBIDDEN: "authorization",
    status.HTTP_404_NOT_FOUND: "resource",
}


def _fail(
    status_code: int,
    errors: list[FieldError],
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=fail_content(errors), headers=headers)


def _validation_field(loc: tuple) -> str:
    # ("body", "email") -> "email"; ("query", "page") -> "page"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header", "cookie")]
    return ".".join(parts) or "request"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    else:
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return _fail(exc.status_code, [FieldError(field=exc.field, message=exc.message)])


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        FieldError(field=_validation_field(tuple(err.get("loc", ()))), message=err.get("msg", "Invalid value"))
        for err in exc.errors()
    ]
    logger.info("Validation failed on %s: %s", request.url.path, [e.field for e in errors])
    return _fail(status.HTTP_400_BAD_REQUEST, errors)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    field = HTTP_ERROR_FIELDS.get(exc.status_code, "request")
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _fail(
        exc.status_code,
        [FieldError(field=field, message=message)],
        headers=getattr(exc, "headers", None),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity violation on %s: %s", request.url.path, exc.orig)
    return _fail(
        status.HTTP_409_CONFLICT,
        [
            FieldError(
                field="database",
                message="This item already exists or a unique field is duplicated.",
            )
        ],
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return _fail(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        [
            FieldError(
                field="general",
                message="An unexpected internal server error occurred. Please try again later.",
            )
        ],
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
