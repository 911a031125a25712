"""Registration-time checks that a callable is a typed JSON handler."""

from __future__ import annotations

import inspect
import types
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union, get_args, get_origin, get_type_hints

from pydantic.errors import PydanticSchemaGenerationError

from .codec import adapter_for, encode_payload, is_payload_type, zero_instance
from .context import HttpContext
from .errors import HandlerSignatureError, PayloadEncodeError

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")

HANDLER_PATTERN = "(HttpContext, <payload>, <payload>) -> Exception | None"

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class HandlerDescriptor(Generic[RequestT, ResponseT]):
    """A validated handler together with its payload types."""

    fn: Callable[[HttpContext, RequestT, ResponseT], BaseException | None]
    request_type: type[RequestT]
    response_type: type[ResponseT]

    @property
    def name(self) -> str:
        return handler_name(self.fn)


def handler_name(fn: Any) -> str:
    return getattr(fn, "__qualname__", None) or type(fn).__qualname__


def describe_shape(fn: Any) -> str:
    """Render the shape of *fn* for error messages."""
    if not callable(fn):
        return f"{type(fn).__qualname__} (not callable)"
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return f"{handler_name(fn)}(?)"
    return f"{handler_name(fn)}{sig}"


def _is_error_or_none(tp: Any) -> bool:
    if tp is type(None):
        return True
    if get_origin(tp) in (Union, types.UnionType):
        return all(_is_error_or_none(arg) for arg in get_args(tp))
    return isinstance(tp, type) and get_origin(tp) is None and issubclass(tp, BaseException)


def _call_target(fn: Any) -> Any:
    if inspect.isfunction(fn) or inspect.ismethod(fn):
        return fn
    return getattr(type(fn), "__call__", fn)


def _is_suspending(fn: Any) -> bool:
    return any(
        inspect.iscoroutinefunction(target)
        or inspect.isasyncgenfunction(target)
        or inspect.isgeneratorfunction(target)
        for target in (fn, _call_target(fn))
    )


def describe_handler(fn: Any) -> HandlerDescriptor[Any, Any]:
    """Validate *fn* and return its :class:`HandlerDescriptor`.

    Raises :class:`HandlerSignatureError` naming the expected pattern and
    the shape actually received. Runs once per callable at registration.
    """
    shape = describe_shape(fn)

    def reject(reason: str) -> HandlerSignatureError:
        return HandlerSignatureError(HANDLER_PATTERN, shape, reason)

    if not callable(fn):
        raise reject("not callable")
    if _is_suspending(fn):
        raise reject("must be a plain synchronous function, not async or a generator")
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError) as exc:
        raise reject("signature is not inspectable") from exc
    try:
        hints = get_type_hints(_call_target(fn))
    except (NameError, TypeError) as exc:
        raise reject(f"annotations cannot be resolved ({exc})") from exc

    positional: list[inspect.Parameter] = []
    for param in sig.parameters.values():
        if param.kind in _POSITIONAL:
            positional.append(param)
        elif param.kind is inspect.Parameter.KEYWORD_ONLY and param.default is not param.empty:
            continue
        else:
            raise reject(f"unexpected parameter {param}")
    if len(positional) != 3:
        raise reject(f"takes {len(positional)} positional parameters, not 3")

    ctx_param, request_param, response_param = positional
    missing = [p.name for p in positional if p.name not in hints]
    if missing:
        raise reject(f"missing annotations for {', '.join(missing)}")

    ctx_type = hints[ctx_param.name]
    if not (
        isinstance(ctx_type, type)
        and get_origin(ctx_type) is None
        and issubclass(ctx_type, HttpContext)
    ):
        raise reject(f"first parameter must be HttpContext, not {ctx_type!r}")
    request_type = hints[request_param.name]
    if not is_payload_type(request_type):
        raise reject(f"request type {request_type!r} is not a model or dataclass")
    response_type = hints[response_param.name]
    if not is_payload_type(response_type):
        raise reject(f"response type {response_type!r} is not a model or dataclass")

    if "return" not in hints:
        raise reject("missing return annotation")
    if not _is_error_or_none(hints["return"]):
        raise reject(f"must return an exception or None, not {hints['return']!r}")

    for payload_type in (request_type, response_type):
        try:
            adapter_for(payload_type)
        except PydanticSchemaGenerationError as exc:
            raise reject(f"{payload_type.__qualname__} cannot be serialized ({exc})") from exc
        try:
            encode_payload(payload_type, zero_instance(payload_type))
        except (TypeError, ValueError, PayloadEncodeError) as exc:
            raise reject(f"{payload_type.__qualname__} has no zero value ({exc})") from exc

    return HandlerDescriptor(fn, request_type, response_type)


__all__ = [
    "HANDLER_PATTERN",
    "HandlerDescriptor",
    "describe_handler",
    "describe_shape",
    "handler_name",
]
