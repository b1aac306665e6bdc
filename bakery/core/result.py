"""
Result type

Expected failures (not found, validation, duplicates, backend errors) are
returned as values instead of raised. A Result is either a success holding a
value or a failure holding an Error, never both.
"""
from typing import Any, Callable, Generic, Optional, TypeVar

from .errors import Error

T = TypeVar("T")
U = TypeVar("U")


class ResultAccessError(RuntimeError):
    """Raised when reading the value of a failure or the error of a success"""


_NO_VALUE: Any = object()


class Result(Generic[T]):
    __slots__ = ("_value", "_error")

    def __init__(self, value: Any = _NO_VALUE, error: Optional[Error] = None):
        if error is not None and value is not _NO_VALUE:
            raise ValueError("A failed result cannot carry a value")
        if error is None and value is _NO_VALUE:
            raise ValueError("A result needs either a value or an error")
        self._value = value
        self._error = error

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        if value is None:
            raise ValueError("A successful result must have a value")
        return cls(value=value)

    @classmethod
    def ok(cls) -> "Result[None]":
        """Success without payload, for commands"""
        return cls(value=None)

    @classmethod
    def failure(cls, error: Error) -> "Result[T]":
        if not isinstance(error, Error):
            raise TypeError("A failed result must carry an Error")
        return cls(error=error)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Result[T]":
        return cls.failure(Error.from_exception(exc))

    @property
    def is_success(self) -> bool:
        return self._error is None

    @property
    def is_failure(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T:
        if self._error is not None:
            raise ResultAccessError(f"Cannot read the value of a failed result ({self._error})")
        return self._value

    @property
    def error(self) -> Error:
        if self._error is None:
            raise ResultAccessError("A successful result has no error")
        return self._error

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        """Apply fn to the value of a success (None included); failures pass through"""
        if self._error is not None:
            return Result.failure(self._error)
        return Result(value=fn(self._value))

    def propagate(self) -> "Result[Any]":
        """Re-type a failure so it can be returned from a caller with another value type"""
        return Result.failure(self.error)

    def __repr__(self) -> str:
        if self._error is not None:
            return f"Result.failure({self._error!r})"
        return f"Result.success({self._value!r})"
