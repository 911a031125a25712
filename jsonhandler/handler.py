"""Adapt typed business functions into plain HTTP handlers.

A typed handler looks like::

    def create_user(ctx: HttpContext, request: NewUser, response: User) -> None:
        response.id = users.add(request.name)

and :func:`json_handler` turns it into a ``(ResponseWriter, Request)``
callable that decodes the JSON body, runs the function and encodes the
populated response, mapping failures onto 400/500 replies.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Generic, Optional, overload

from .codec import MEDIA_TYPE, decode_payload, encode_payload, zero_instance
from .config import Settings, TrustPolicy, load_settings
from .context import HttpContext, RequestContext
from .errors import ErrorKind, PayloadDecodeError, PayloadEncodeError, classify_error
from .http import Request, ResponseWriter
from .metrics import (
    OUTCOME_BAD_REQUEST,
    OUTCOME_INTERNAL_ERROR,
    OUTCOME_OK,
    OUTCOME_SELF_MANAGED,
    HandlerMetrics,
    default_metrics,
)
from .reporting import ErrorReporter
from .signature import HandlerDescriptor, RequestT, ResponseT, describe_handler
from .writer import TrackedWriter

_LOGGER = logging.getLogger("jsonhandler.request")

TypedHandler = Callable[[HttpContext, RequestT, ResponseT], Optional[BaseException]]


class JsonHandler(Generic[RequestT, ResponseT]):
    """HTTP handler wrapping one validated typed function.

    Holds no per-request state, so a single instance may serve concurrent
    requests. Request and response payloads are allocated fresh each call.
    """

    def __init__(
        self,
        descriptor: HandlerDescriptor[RequestT, ResponseT],
        *,
        settings: Settings | None = None,
        reporter: ErrorReporter | None = None,
        logger: logging.Logger | None = None,
        trust_policy: TrustPolicy | None = None,
        metrics: HandlerMetrics | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.settings = settings or load_settings()
        self.reporter = reporter or ErrorReporter(
            self.settings, logger=logger, trust_policy=trust_policy
        )
        self.logger = logger or _LOGGER
        self.metrics = metrics or default_metrics()

    @property
    def name(self) -> str:
        return self.descriptor.name

    def __call__(self, w: ResponseWriter, r: Request) -> None:
        start = time.perf_counter()
        outcome = self.serve(w, r)
        duration = time.perf_counter() - start
        self.metrics.observe(self.name, outcome, duration)
        self.logger.debug(
            "%s %s handler=%s outcome=%s duration_ms=%.2f",
            r.method,
            r.path,
            self.name,
            outcome,
            duration * 1000,
        )

    def serve(self, sink: ResponseWriter, r: Request) -> str:
        """Handle one request and return its outcome label."""
        w = TrackedWriter(sink)
        descriptor = self.descriptor

        try:
            request = self._decode(r)
        except PayloadDecodeError as exc:
            self.reporter.bad_request(w, r, exc, self.name)
            return OUTCOME_BAD_REQUEST

        try:
            response = zero_instance(descriptor.response_type)
        except Exception as exc:
            self.reporter.internal_error(w, r, exc, self.name)
            return OUTCOME_INTERNAL_ERROR

        ctx = RequestContext(w, r)
        try:
            returned = descriptor.fn(ctx, request, response)
        except Exception as exc:
            returned = exc
        if returned is not None and not isinstance(returned, BaseException):
            returned = TypeError(
                f"{self.name} returned {type(returned).__name__}, expected an exception or None"
            )

        classified = classify_error(returned)
        if classified.kind is ErrorKind.BAD_REQUEST:
            self.reporter.bad_request(w, r, classified.error, self.name)  # type: ignore[arg-type]
            return OUTCOME_BAD_REQUEST
        if classified.kind is ErrorKind.INTERNAL:
            self.reporter.internal_error(w, r, classified.error, self.name)  # type: ignore[arg-type]
            return OUTCOME_INTERNAL_ERROR

        if w.skip_response:
            return OUTCOME_SELF_MANAGED

        try:
            data = encode_payload(descriptor.response_type, response)
        except PayloadEncodeError as exc:
            self.reporter.internal_error(w, r, exc, self.name)
            return OUTCOME_INTERNAL_ERROR
        w.header().set("Content-Type", MEDIA_TYPE)
        w.write(data)
        return OUTCOME_OK

    def _decode(self, r: Request) -> RequestT:
        limit = self.settings.max_body_bytes
        try:
            body = r.read_body(limit)
        except OSError as exc:
            raise PayloadDecodeError("unable to read request body") from exc
        if limit is not None and len(body) > limit:
            raise PayloadDecodeError("request body too large")
        return decode_payload(self.descriptor.request_type, body)

    def __repr__(self) -> str:
        return (
            f"JsonHandler({self.name}, request={self.descriptor.request_type.__qualname__}, "
            f"response={self.descriptor.response_type.__qualname__})"
        )


@overload
def json_handler(fn: TypedHandler[RequestT, ResponseT], **options: Any) -> JsonHandler[RequestT, ResponseT]:
    ...


@overload
def json_handler(
    fn: None = None, **options: Any
) -> Callable[[TypedHandler[RequestT, ResponseT]], JsonHandler[RequestT, ResponseT]]:
    ...


def json_handler(fn: Any = None, **options: Any) -> Any:
    """Validate *fn* and wrap it into a :class:`JsonHandler`.

    Usable directly or as a decorator, with or without keyword options
    (``settings``, ``reporter``, ``logger``, ``trust_policy``, ``metrics``).
    Raises :class:`~jsonhandler.errors.HandlerSignatureError` right away if
    *fn* does not have the typed handler shape.
    """

    def register(func: Any) -> JsonHandler[Any, Any]:
        return JsonHandler(describe_handler(func), **options)

    if fn is None:
        return register
    return register(fn)


__all__ = ["JsonHandler", "TypedHandler", "json_handler"]
