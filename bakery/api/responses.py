"""
Result -> HTTP translation

Success: {"status": "success", "data": ...}
Failure: {"status": "error", "error": {"kind": ..., "message": ...}}
"""
import logging
from typing import TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse

from bakery.core.errors import Error, ErrorKind
from bakery.core.result import Result

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DIRECTORY_NOT_FOUND: 404,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.INVALID_PAGING: 400,
    ErrorKind.ARGUMENT_ERROR: 400,
    ErrorKind.ARGUMENT_NULL: 400,
    ErrorKind.ARGUMENT_OUT_OF_RANGE: 400,
    ErrorKind.NOT_SUPPORTED: 400,
    ErrorKind.DUPLICATED_ENTRY: 409,
    ErrorKind.INVALID_OPERATION: 409,
    ErrorKind.UNAUTHORIZED_ACCESS: 403,
    ErrorKind.SECURITY_VIOLATION: 403,
}


def status_code_for(error: Error) -> int:
    return STATUS_CODES.get(error.kind, 500)


class ApiError(Exception):
    """A failed Result on its way to the client"""

    def __init__(self, error: Error):
        super().__init__(str(error))
        self.error = error

    @property
    def status_code(self) -> int:
        return status_code_for(self.error)


def unwrap(result: Result[T]) -> T:
    """Value of a success; a failure becomes an ApiError"""
    if result.is_failure:
        raise ApiError(result.error)
    return result.value


def success(data=None) -> dict:
    return {"status": "success", "data": data}


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error.kind.value}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "error": exc.error.to_dict()},
    )
