"""Typed JSON request handlers for any HTTP serving stack."""

__version__ = "0.1.0"

from .asgi import ASGIAdapter
from .codec import MEDIA_TYPE, Empty
from .config import Settings, load_settings
from .context import HttpContext, RequestContext
from .errors import (
    BadRequestError,
    ClassifiedError,
    ErrorKind,
    HandlerSignatureError,
    JsonHandlerError,
    bad_request_errorf,
    classify_error,
)
from .handler import JsonHandler, json_handler
from .http import Request, ResponseRecorder, ResponseWriter
from .reporting import ErrorReporter
from .signature import HandlerDescriptor, describe_handler
from .testclient import Response as TestResponse
from .testclient import TestClient
from .wsgi import WSGIAdapter
from .writer import TrackedWriter

__all__ = [
    "__version__",
    "ASGIAdapter",
    "BadRequestError",
    "ClassifiedError",
    "Empty",
    "ErrorKind",
    "ErrorReporter",
    "HandlerDescriptor",
    "HandlerSignatureError",
    "HttpContext",
    "JsonHandler",
    "JsonHandlerError",
    "MEDIA_TYPE",
    "Request",
    "RequestContext",
    "ResponseRecorder",
    "ResponseWriter",
    "Settings",
    "TestClient",
    "TestResponse",
    "TrackedWriter",
    "WSGIAdapter",
    "bad_request_errorf",
    "classify_error",
    "describe_handler",
    "json_handler",
    "load_settings",
]
