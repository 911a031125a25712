"""Per-request context handed to typed handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from .http import Request, ResponseWriter


class HttpContext(ABC):
    """Capabilities a handler gets besides its decoded payload."""

    @property
    @abstractmethod
    def w(self) -> ResponseWriter:
        """The response sink for this request."""

    @property
    @abstractmethod
    def r(self) -> Request:
        """The inbound request."""

    @property
    @abstractmethod
    def now(self) -> datetime:
        """Wall-clock time captured when the context was created."""


class RequestContext(HttpContext):
    """Default :class:`HttpContext` built once per request."""

    __slots__ = ("_w", "_r", "_now")

    def __init__(
        self,
        w: ResponseWriter,
        r: Request,
        now: datetime | None = None,
    ) -> None:
        self._w = w
        self._r = r
        self._now = now or datetime.now(timezone.utc)

    @property
    def w(self) -> ResponseWriter:
        return self._w

    @property
    def r(self) -> Request:
        return self._r

    @property
    def now(self) -> datetime:
        return self._now

    def __repr__(self) -> str:
        return f"RequestContext({self._r!r}, now={self._now.isoformat()})"


__all__ = ["HttpContext", "RequestContext"]
