"""JSON wire codec for request and response payload types.

Payload types are pydantic ``BaseModel`` subclasses or dataclasses. Each
request works on freshly allocated instances; adapters are cached per type
when a handler is registered, so request handling only reads the cache.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import enum
import types
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Annotated, Any, Literal, Union, get_args, get_origin, get_type_hints
from uuid import UUID

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, from_json, to_json

from .errors import EmptyBodyError, PayloadDecodeError, PayloadEncodeError

MEDIA_TYPE = "application/json"

EMPTY_BODY_MESSAGE = "unable to parse request; did not expect empty body"
MALFORMED_BODY_MESSAGE = "unable to parse request"

_TYPE_ADAPTER_CACHE: dict[Any, TypeAdapter[Any]] = {}

_SCALAR_ZEROS: dict[Any, Any] = {
    int: 0,
    float: 0.0,
    complex: 0j,
    str: "",
    bool: False,
    bytes: b"",
    Decimal: Decimal(0),
    datetime: datetime(1, 1, 1, tzinfo=timezone.utc),
    date: date(1, 1, 1),
    time: time(0),
    timedelta: timedelta(0),
    UUID: UUID(int=0),
}

_COLLECTION_ZEROS: dict[Any, Any] = {
    list: list,
    dict: dict,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
    collections.abc.Set: set,
    collections.abc.MutableSet: set,
}

_UNION_TYPES: tuple[Any, ...] = (Union, types.UnionType)


class Empty(BaseModel):
    """Payload with no fields; accepts an empty request body."""


def is_payload_type(tp: Any) -> bool:
    """Return ``True`` if *tp* is a record type the codec can handle."""
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    return issubclass(tp, BaseModel) or dataclasses.is_dataclass(tp)


def payload_field_names(tp: type) -> list[str]:
    if issubclass(tp, BaseModel):
        return list(tp.model_fields)
    return [f.name for f in dataclasses.fields(tp)]


def is_empty_payload(tp: type) -> bool:
    """Return ``True`` for zero-field payload types such as :class:`Empty`."""
    return not payload_field_names(tp)


def adapter_for(tp: Any) -> TypeAdapter[Any]:
    """Return a cached ``TypeAdapter`` for *tp*."""
    adapter = _TYPE_ADAPTER_CACHE.get(tp)
    if adapter is None:
        adapter = TypeAdapter(tp)
        _TYPE_ADAPTER_CACHE[tp] = adapter
    return adapter


def zero_value(tp: Any) -> Any:
    """Return the zero value for a field annotated with *tp*.

    Collections get a new empty instance on every call; optionals are
    ``None``. Raises ``TypeError`` for annotations with no zero value, so
    a payload type using them is refused when its handler is registered.
    """
    if tp is Any or tp is object or tp is None or tp is type(None):
        return None
    origin = get_origin(tp)
    if origin is Annotated:
        return zero_value(get_args(tp)[0])
    if origin in _UNION_TYPES:
        args = get_args(tp)
        if type(None) in args:
            return None
        return zero_value(args[0])
    if origin is Literal:
        return get_args(tp)[0]
    if origin is tuple:
        args = get_args(tp)
        if args and args[-1] is not Ellipsis and args != ((),):
            return tuple(zero_value(arg) for arg in args)
        return ()
    if origin is not None:
        factory = _COLLECTION_ZEROS.get(origin)
        if factory is None:
            raise TypeError(f"no zero value for {tp!r}")
        return factory()
    if isinstance(tp, type):
        if issubclass(tp, enum.Enum):
            members = list(tp)
            if members:
                return members[0]
            raise TypeError(f"no zero value for empty enum {tp!r}")
        if is_payload_type(tp):
            return zero_instance(tp)
        if tp in _SCALAR_ZEROS:
            return _SCALAR_ZEROS[tp]
        factory = _COLLECTION_ZEROS.get(tp)
        if factory is not None:
            return factory()
    raise TypeError(f"no zero value for {tp!r}")


def zero_instance(tp: type) -> Any:
    """Allocate a fresh zero-valued instance of payload type *tp*.

    Fields with defaults keep them; required fields get :func:`zero_value`.
    """
    if issubclass(tp, BaseModel):
        values = {
            name: zero_value(info.annotation)
            for name, info in tp.model_fields.items()
            if info.is_required()
        }
        return tp.model_construct(**values)
    hints = get_type_hints(tp, include_extras=True)
    kwargs = {
        f.name: zero_value(hints.get(f.name, Any))
        for f in dataclasses.fields(tp)
        if f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING
    }
    return tp(**kwargs)


def _merge_missing(zero: Any, data: Any) -> Any:
    if isinstance(zero, dict) and isinstance(data, dict):
        merged = dict(zero)
        for key, value in data.items():
            merged[key] = _merge_missing(zero.get(key), value)
        return merged
    return data


def decode_payload(tp: type, body: bytes) -> Any:
    """Decode *body* into a new zero-valued instance of *tp*.

    The body is laid over the zero instance: fields it leaves out keep
    their zero value, nested records included, and a ``null`` body leaves
    the whole instance at zero. The merged data is validated strictly, so
    ``"2014"`` is not accepted for an ``int`` field.

    Raises :class:`EmptyBodyError` for an empty body unless *tp* has no
    fields, and :class:`PayloadDecodeError` for invalid JSON or anything
    pydantic rejects.
    """
    if not body.strip():
        if is_empty_payload(tp):
            return zero_instance(tp)
        raise EmptyBodyError(EMPTY_BODY_MESSAGE)
    try:
        data = from_json(body)
    except ValueError as exc:
        raise PayloadDecodeError(MALFORMED_BODY_MESSAGE) from exc
    if data is None:
        return zero_instance(tp)
    adapter = adapter_for(tp)
    if isinstance(data, dict):
        zero = adapter.dump_python(zero_instance(tp), mode="json", by_alias=True)
        data = _merge_missing(zero, data)
    try:
        return adapter.validate_json(to_json(data), strict=True)
    except ValidationError as exc:
        raise PayloadDecodeError(MALFORMED_BODY_MESSAGE) from exc


def encode_payload(tp: type, value: Any) -> bytes:
    """Serialize *value* as compact JSON followed by a newline.

    Values that do not match their declared field types are rejected
    rather than serialized with a warning.
    """
    try:
        data = adapter_for(tp).dump_json(value, by_alias=True, warnings="error")
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        raise PayloadEncodeError(f"unable to encode response: {exc}") from exc
    return data + b"\n"


__all__ = [
    "EMPTY_BODY_MESSAGE",
    "Empty",
    "MALFORMED_BODY_MESSAGE",
    "MEDIA_TYPE",
    "adapter_for",
    "decode_payload",
    "encode_payload",
    "is_empty_payload",
    "is_payload_type",
    "payload_field_names",
    "zero_instance",
    "zero_value",
]
