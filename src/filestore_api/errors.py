"""Exception taxonomy for the storage core and the FastAPI handlers that map it to HTTP."""

import logging
from typing import Any, Dict, List, Optional

import pydantic
from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class FileStorageError(Exception):
    """Base class for every error raised by the storage core."""


class FileValidationError(FileStorageError):
    """Bad caller input. Surfaced as-is, never retried."""


class InvalidNameError(FileValidationError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid file name: {name}")


class InvalidInputError(FileValidationError):
    pass


class NameMismatchError(FileValidationError):
    def __init__(self, expected: str, received: str):
        self.expected = expected
        self.received = received
        super().__init__(
            f"File name mismatch: expected '{expected}', but received '{received}'."
        )


class InvalidPatternError(FileValidationError):
    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"Invalid regex pattern: {pattern}")


class NotFoundError(FileStorageError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"File not found: {name}")


class StorageIOError(FileStorageError):
    """A filesystem operation failed while copying, moving, deleting or listing."""


class StorageInitError(FileStorageError):
    """The storage root could not be created. Fatal at startup."""


#######################################
# --- Error envelope construction --- #
#######################################

def build_error_response(
    error_code: str,
    message: str,
    status_code: int,
    source: Optional[str] = None,
) -> JSONResponse:
    """Wrap a single error in the standard `{data, exceptions}` envelope."""
    exceptions: List[Dict[str, Any]] = [
        {
            "error_code": error_code,
            "exception_source": source or error_code,
            "exception_message": message,
        }
    ]
    return JSONResponse(
        status_code=status_code,
        content={"data": None, "exceptions": exceptions},
    )


async def handle_file_storage_error(request: Request, exc: FileStorageError) -> JSONResponse:
    """Map storage-core exceptions to HTTP responses."""
    source = type(exc).__name__
    if isinstance(exc, FileValidationError):
        logger.error(f"Invalid request on {request.url.path}: {exc}")
        return build_error_response(
            "INVALID_REQUEST", str(exc), status.HTTP_400_BAD_REQUEST, source
        )
    if isinstance(exc, NotFoundError):
        logger.warning(f"File not found on {request.url.path}: {exc}")
        return build_error_response(
            "FILE_NOT_FOUND",
            "The requested file was not found.",
            status.HTTP_404_NOT_FOUND,
            source,
        )
    logger.error(f"Storage failure on {request.url.path}: {exc}", exc_info=exc)
    return build_error_response(
        "APPLICATION_ERROR",
        "Something went wrong. Please try again later.",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        source,
    )


async def handle_request_validation_errors(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Turn FastAPI's request validation errors into the original 400 codes."""
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        if error.get("type") != "missing" or len(loc) < 2:
            continue
        if loc[0] == "body" and loc[1] == "file":
            logger.warning(f"No file part in request to {request.url.path}")
            return build_error_response(
                "MISSING_FILE",
                "No file was uploaded. Make sure your request includes a 'file' field.",
                status.HTTP_400_BAD_REQUEST,
            )
        if loc[0] == "query":
            logger.error(f"Missing query parameter '{loc[1]}' on {request.url.path}")
            return build_error_response(
                "MISSING_PARAMETER",
                f"Missing required parameter: {loc[1]}.",
                status.HTTP_400_BAD_REQUEST,
            )

    logger.error(f"Request validation failed on {request.url.path}: {exc.errors()}")
    return build_error_response(
        "INVALID_REQUEST",
        "; ".join(_format_error(error) for error in exc.errors()),
        status.HTTP_400_BAD_REQUEST,
    )


async def handle_pydantic_validation_errors(
    request: Request, exc: pydantic.ValidationError
) -> JSONResponse:
    errors = exc.errors()
    return build_error_response(
        "INVALID_REQUEST",
        "; ".join(_format_error(error) for error in errors),
        status.HTTP_400_BAD_REQUEST,
    )


async def handle_http_exceptions(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return build_error_response(
            "RESOURCE_NOT_FOUND",
            "This endpoint does not exist. Check the URL and try again.",
            status.HTTP_404_NOT_FOUND,
        )
    return build_error_response(
        "APPLICATION_ERROR", str(exc.detail), exc.status_code
    )


async def handle_broad_exceptions(request: Request, call_next) -> Response:
    """Catch anything the typed handlers did not, so clients always get an envelope."""
    try:
        return await call_next(request)
    except Exception as exc:  # noqa: BLE001
        logger.exception(f"Unexpected error on {request.method} {request.url.path}")
        return build_error_response(
            "INTERNAL_SERVER_ERROR",
            "Something went wrong. Please try again later.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            type(exc).__name__,
        )


def _format_error(error: Dict[str, Any]) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ()))
    return f"{loc}: {error.get('msg')}" if loc else str(error.get("msg"))
