"""Registration-time validation of typed handler shapes."""

from datetime import datetime
from typing import Optional
from uuid import UUID

import pytest
from pydantic import BaseModel, ConfigDict

from jsonhandler import BadRequestError, Empty, HandlerSignatureError, HttpContext, describe_handler
from jsonhandler.http import Request
from jsonhandler.signature import HANDLER_PATTERN
from tests.payloads import SampleRequest, SampleResponse, Totals, correct, fails


def test_handler_of_correct() -> None:
    descriptor = describe_handler(correct)
    assert descriptor.fn is correct
    assert descriptor.request_type is SampleRequest
    assert descriptor.response_type is SampleResponse
    assert descriptor.name == "correct"


def test_optional_error_return_accepted() -> None:
    assert describe_handler(fails).response_type is SampleResponse


def test_union_error_return_accepted() -> None:
    def handler(ctx: HttpContext, request: Empty, response: Totals) -> BadRequestError | None:
        return None

    assert describe_handler(handler).response_type is Totals


def test_string_annotations_resolved() -> None:
    def handler(ctx: "HttpContext", request: "SampleRequest", response: "SampleResponse") -> "None":
        return None

    assert describe_handler(handler).request_type is SampleRequest


def test_callable_object_accepted() -> None:
    class Handler:
        def __call__(self, ctx: HttpContext, request: Empty, response: Empty) -> None:
            return None

    assert describe_handler(Handler()).request_type is Empty


def test_bound_method_accepted() -> None:
    class Service:
        def handle(self, ctx: HttpContext, request: Empty, response: Empty) -> Optional[Exception]:
            return None

    assert describe_handler(Service().handle).response_type is Empty


def test_keyword_only_with_default_accepted() -> None:
    def handler(ctx: HttpContext, request: Empty, response: Empty, *, verbose: bool = False) -> None:
        return None

    describe_handler(handler)


def test_wrong_parameter_count() -> None:
    def handler(ctx: HttpContext, request: Empty) -> None:
        return None

    with pytest.raises(HandlerSignatureError) as exc_info:
        describe_handler(handler)
    message = str(exc_info.value)
    assert message.startswith(f"expected {HANDLER_PATTERN}, got ")
    assert "handler(ctx: jsonhandler.context.HttpContext" in message
    assert "takes 2 positional parameters, not 3" in message


def test_missing_annotations() -> None:
    def handler(ctx, request, response):
        return None

    with pytest.raises(HandlerSignatureError, match="missing annotations for ctx, request, response"):
        describe_handler(handler)


def test_wrong_context_type() -> None:
    def handler(ctx: Request, request: Empty, response: Empty) -> None:
        return None

    with pytest.raises(HandlerSignatureError, match="first parameter must be HttpContext"):
        describe_handler(handler)


def test_request_type_must_be_record() -> None:
    def handler(ctx: HttpContext, request: dict, response: Empty) -> None:
        return None

    with pytest.raises(HandlerSignatureError, match="request type"):
        describe_handler(handler)


def test_response_type_must_be_record() -> None:
    def handler(ctx: HttpContext, request: Empty, response: str) -> None:
        return None

    with pytest.raises(HandlerSignatureError, match="response type"):
        describe_handler(handler)


def test_return_must_be_error_or_none() -> None:
    def handler(ctx: HttpContext, request: Empty, response: Empty) -> int:
        return 0

    with pytest.raises(HandlerSignatureError, match="must return an exception or None"):
        describe_handler(handler)


def test_missing_return_annotation() -> None:
    def handler(ctx: HttpContext, request: Empty, response: Empty):
        return None

    with pytest.raises(HandlerSignatureError, match="missing return annotation"):
        describe_handler(handler)


def test_var_args_rejected() -> None:
    def handler(ctx: HttpContext, *args: Empty) -> None:
        return None

    with pytest.raises(HandlerSignatureError, match="unexpected parameter"):
        describe_handler(handler)


def test_not_callable() -> None:
    with pytest.raises(HandlerSignatureError) as exc_info:
        describe_handler(42)
    assert "int (not callable)" in str(exc_info.value)


def test_unresolvable_annotation() -> None:
    def handler(ctx: HttpContext, request: "Missing", response: Empty) -> None:  # noqa: F821
        return None

    with pytest.raises(HandlerSignatureError, match="annotations cannot be resolved"):
        describe_handler(handler)


def test_signature_error_is_type_error() -> None:
    assert issubclass(HandlerSignatureError, TypeError)


async def async_handler(ctx: HttpContext, request: Empty, response: Empty) -> None:
    return None


def generator_handler(ctx: HttpContext, request: Empty, response: Empty) -> None:
    yield None


async def async_generator_handler(ctx: HttpContext, request: Empty, response: Empty) -> None:
    yield None


class AsyncCallable:
    async def __call__(self, ctx: HttpContext, request: Empty, response: Empty) -> None:
        return None


@pytest.mark.parametrize(
    "handler",
    [async_handler, generator_handler, async_generator_handler, AsyncCallable()],
)
def test_suspending_handlers_rejected(handler) -> None:
    with pytest.raises(HandlerSignatureError, match="must be a plain synchronous function"):
        describe_handler(handler)


class Stamp:
    pass


class Stamped(BaseModel):
    at: datetime
    ident: UUID


class Tagged(BaseModel):
    stamp: Stamp

    model_config = ConfigDict(arbitrary_types_allowed=True)


def test_zero_valued_response_with_time_fields_accepted() -> None:
    def handler(ctx: HttpContext, request: Empty, response: Stamped) -> None:
        return None

    assert describe_handler(handler).response_type is Stamped


def test_field_without_zero_value_rejected() -> None:
    def handler(ctx: HttpContext, request: Empty, response: Tagged) -> None:
        return None

    with pytest.raises(HandlerSignatureError, match="Tagged has no zero value"):
        describe_handler(handler)
