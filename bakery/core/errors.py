"""
Error catalogue

Every failure that crosses a component boundary is described by an Error:
a stable machine-readable kind, the fixed description of that kind and an
optional detail message for the specific occurrence.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, NoResultFound


class ErrorKind(str, Enum):
    """Closed set of error kinds"""

    NOT_FOUND = "NotFound"
    INVALID_INPUT = "InvalidInput"
    INVALID_PAGING = "InvalidPaging"
    DUPLICATED_ENTRY = "DuplicatedEntry"
    NOT_SUPPORTED = "NotSupported"
    INVALID_OPERATION = "InvalidOperation"
    ARGUMENT_ERROR = "ArgumentError"
    ARGUMENT_NULL = "ArgumentNull"
    ARGUMENT_OUT_OF_RANGE = "ArgumentOutOfRange"
    DIRECTORY_NOT_FOUND = "DirectoryNotFound"
    UNAUTHORIZED_ACCESS = "UnauthorizedAccess"
    SECURITY_VIOLATION = "SecurityViolation"
    IO = "IO"
    UNEXPECTED_ERROR = "UnexpectedError"


DESCRIPTIONS = {
    ErrorKind.NOT_FOUND: "The item you are trying to find has not been found",
    ErrorKind.INVALID_INPUT: "The input provided is not valid",
    ErrorKind.INVALID_PAGING: "The paging options provided are not valid",
    ErrorKind.DUPLICATED_ENTRY: "The record you are trying to insert is already present",
    ErrorKind.NOT_SUPPORTED: "The operation is not supported",
    ErrorKind.INVALID_OPERATION: "The operation is not valid in the current state",
    ErrorKind.ARGUMENT_ERROR: "An argument error occurred",
    ErrorKind.ARGUMENT_NULL: "An argument was null",
    ErrorKind.ARGUMENT_OUT_OF_RANGE: "An argument was out of range",
    ErrorKind.DIRECTORY_NOT_FOUND: "The directory was not found",
    ErrorKind.UNAUTHORIZED_ACCESS: "You do not have permission to access this resource",
    ErrorKind.SECURITY_VIOLATION: "A security violation occurred",
    ErrorKind.IO: "An I/O error occurred",
    ErrorKind.UNEXPECTED_ERROR: "Unexpected error occurred",
}


@dataclass(frozen=True)
class Error:
    """A failure reason carried by Result"""

    kind: ErrorKind
    description: str
    detail: Optional[str] = None

    @classmethod
    def of(cls, kind: ErrorKind, detail: Optional[str] = None) -> "Error":
        return cls(kind=kind, description=DESCRIPTIONS[kind], detail=detail)

    @property
    def message(self) -> str:
        """Detail when present, otherwise the description of the kind"""
        return self.detail or self.description

    def with_detail(self, detail: str) -> "Error":
        return replace(self, detail=detail)

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message}

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"

    @classmethod
    def not_found(cls, detail: Optional[str] = None) -> "Error":
        return cls.of(ErrorKind.NOT_FOUND, detail)

    @classmethod
    def invalid_input(cls, detail: Optional[str] = None) -> "Error":
        return cls.of(ErrorKind.INVALID_INPUT, detail)

    @classmethod
    def invalid_paging(cls, detail: Optional[str] = None) -> "Error":
        return cls.of(ErrorKind.INVALID_PAGING, detail)

    @classmethod
    def duplicated_entry(cls, detail: Optional[str] = None) -> "Error":
        return cls.of(ErrorKind.DUPLICATED_ENTRY, detail)

    @classmethod
    def not_supported(cls, detail: Optional[str] = None) -> "Error":
        return cls.of(ErrorKind.NOT_SUPPORTED, detail)

    @classmethod
    def invalid_operation(cls, detail: Optional[str] = None) -> "Error":
        return cls.of(ErrorKind.INVALID_OPERATION, detail)

    @classmethod
    def unexpected(cls, detail: Optional[str] = None) -> "Error":
        return cls.of(ErrorKind.UNEXPECTED_ERROR, detail)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Error":
        """
        Translate an exception into an Error

        Subclasses are listed before their bases (FileNotFoundError before
        OSError, IntegrityError before the generic fallback).
        """
        for exc_type, kind in _EXCEPTION_KINDS:
            if isinstance(exc, exc_type):
                return cls.of(kind, str(exc) or None)
        return cls.of(ErrorKind.UNEXPECTED_ERROR, str(exc) or None)


_EXCEPTION_KINDS = (
    (IntegrityError, ErrorKind.DUPLICATED_ENTRY),
    (NoResultFound, ErrorKind.NOT_FOUND),
    (ValidationError, ErrorKind.INVALID_INPUT),
    (PermissionError, ErrorKind.UNAUTHORIZED_ACCESS),
    (FileNotFoundError, ErrorKind.DIRECTORY_NOT_FOUND),
    (NotADirectoryError, ErrorKind.DIRECTORY_NOT_FOUND),
    (OSError, ErrorKind.IO),
    (IndexError, ErrorKind.ARGUMENT_OUT_OF_RANGE),
    (NotImplementedError, ErrorKind.NOT_SUPPORTED),
    (ValueError, ErrorKind.ARGUMENT_ERROR),
    (TypeError, ErrorKind.ARGUMENT_ERROR),
)
