"""Failure responses for typed JSON handlers.

Both failure paths tag the response with a fresh correlation id header and
log the full error under that id, whatever the client gets to see.
"""

from __future__ import annotations

import logging
import uuid

from .codec import MEDIA_TYPE
from .config import Settings, TrustPolicy, load_settings
from .errors import BadRequestError
from .http import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
    Request,
    ResponseWriter,
)

_LOGGER = logging.getLogger("jsonhandler")


def new_error_id() -> str:
    """Return a random 128-bit correlation id."""
    return str(uuid.uuid4())


class ErrorReporter:
    """Write 400 and 500 responses and log them with a correlation id."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        logger: logging.Logger | None = None,
        trust_policy: TrustPolicy | None = None,
        bad_request_policy: TrustPolicy | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.logger = logger or _LOGGER
        self.trust_policy = trust_policy or self.settings.internal_error_policy()
        self.bad_request_policy = bad_request_policy or self.settings.bad_request_policy()

    def bad_request(
        self,
        w: ResponseWriter,
        r: Request,
        error: BadRequestError,
        handler: str = "",
    ) -> str:
        """Reply 400 with ``{"err": ...}`` and return the correlation id."""
        error_id = new_error_id()
        w.header().set(self.settings.error_id_header, error_id)
        show = self.bad_request_policy(r)
        if show:
            w.header().set("Content-Type", MEDIA_TYPE)
        w.write_header(HTTP_400_BAD_REQUEST)
        if show:
            w.write(error.to_json().encode() + b"\n")
        self.logger.error(
            "errId=%s, err=%s, handler=%s, status=%d",
            error_id,
            error.message,
            handler,
            HTTP_400_BAD_REQUEST,
        )
        return error_id

    def internal_error(
        self,
        w: ResponseWriter,
        r: Request,
        error: BaseException,
        handler: str = "",
    ) -> str:
        """Reply 500, echoing the error text only to trusted callers."""
        error_id = new_error_id()
        w.header().set(self.settings.error_id_header, error_id)
        w.write_header(HTTP_500_INTERNAL_SERVER_ERROR)
        if self.trust_policy(r):
            w.write(str(error).encode())
        self.logger.error(
            "errId=%s, err=%s, handler=%s, status=%d",
            error_id,
            error,
            handler,
            HTTP_500_INTERNAL_SERVER_ERROR,
            exc_info=(type(error), error, error.__traceback__),
        )
        return error_id


__all__ = ["ErrorReporter", "new_error_id"]
