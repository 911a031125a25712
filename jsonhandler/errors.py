"""Error types raised or returned around typed JSON handlers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class JsonHandlerError(Exception):
    """Base class for errors raised by this package."""


class HandlerSignatureError(JsonHandlerError, TypeError):
    """A callable does not have the shape of a typed JSON handler."""

    def __init__(self, expected: str, actual: str, reason: str = "") -> None:
        self.expected = expected
        self.actual = actual
        self.reason = reason
        message = f"expected {expected}, got {actual}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class BadRequestError(JsonHandlerError):
    """Signal that the client sent an erroneous request.

    Handlers return or raise this to get a 400 response whose body is
    ``{"err": "<message>"}`` instead of a 500.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"err": self.message}

    def to_json(self) -> str:
        """Return the compact JSON form, e.g. ``{"err":"the_err_here"}``."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)


def bad_request_errorf(fmt: str, *args: Any) -> BadRequestError:
    """Build a :class:`BadRequestError` from a ``%``-style format."""
    return BadRequestError(fmt % args if args else fmt)


class PayloadDecodeError(BadRequestError):
    """The request body could not be decoded into the payload type."""


class EmptyBodyError(PayloadDecodeError):
    """The request body was empty but the payload type has fields."""


class PayloadEncodeError(JsonHandlerError):
    """The response payload could not be serialized."""


class ErrorKind(str, Enum):
    """How a handler outcome maps onto the response."""

    NONE = "none"
    BAD_REQUEST = "bad_request"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ClassifiedError:
    """A handler outcome tagged with its :class:`ErrorKind`."""

    kind: ErrorKind
    error: BaseException | None = None

    @property
    def message(self) -> str:
        if self.error is None:
            return ""
        if isinstance(self.error, BadRequestError):
            return self.error.message
        return str(self.error)

    def __bool__(self) -> bool:
        return self.kind is not ErrorKind.NONE


NO_ERROR = ClassifiedError(ErrorKind.NONE)


def classify_error(error: BaseException | None) -> ClassifiedError:
    """Tag *error* as no error, a bad request, or an internal error."""
    if error is None:
        return NO_ERROR
    if isinstance(error, BadRequestError):
        return ClassifiedError(ErrorKind.BAD_REQUEST, error)
    return ClassifiedError(ErrorKind.INTERNAL, error)


__all__ = [
    "BadRequestError",
    "ClassifiedError",
    "EmptyBodyError",
    "ErrorKind",
    "HandlerSignatureError",
    "JsonHandlerError",
    "NO_ERROR",
    "PayloadDecodeError",
    "PayloadEncodeError",
    "bad_request_errorf",
    "classify_error",
]
