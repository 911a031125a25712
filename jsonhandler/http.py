"""Minimal HTTP primitives shared by handlers and host-stack bridges."""

from __future__ import annotations

import io
from http import HTTPStatus
from typing import BinaryIO, Callable, Dict, Mapping, Protocol
from urllib.parse import parse_qs, urlsplit

HTTP_200_OK = 200
HTTP_400_BAD_REQUEST = 400
HTTP_401_UNAUTHORIZED = 401
HTTP_500_INTERNAL_SERVER_ERROR = 500


class Headers(Dict[str, str]):
    """Case-insensitive header mapping storing lower-cased keys."""

    def __init__(self, items: Mapping[str, str] | None = None) -> None:
        super().__init__()
        for key, value in (items or {}).items():
            self[key] = value

    def __setitem__(self, key: str, value: str) -> None:
        super().__setitem__(key.lower(), value)

    def __getitem__(self, key: str) -> str:
        return super().__getitem__(key.lower())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and super().__contains__(key.lower())

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        return super().get(key.lower(), default)

    def set(self, key: str, value: str) -> None:
        """Set or replace a header."""
        self[key] = value


class Request:
    """Represent an inbound HTTP request.

    ``body`` may be raw bytes or a binary stream; the handler adapter reads
    it fully once and closes it.
    """

    def __init__(
        self,
        method: str = "GET",
        url: str = "/",
        body: bytes | BinaryIO = b"",
        headers: Mapping[str, str] | None = None,
        host: str | None = None,
        remote_addr: str = "",
    ) -> None:
        self.method = method.upper()
        self.url = url
        self.body: BinaryIO = io.BytesIO(body) if isinstance(body, bytes) else body
        self.headers = Headers(headers)
        parts = urlsplit(url)
        self.path = parts.path or "/"
        self.query_params = {
            k: (v[0] if len(v) == 1 else v) for k, v in parse_qs(parts.query).items()
        }
        self.host = _strip_port(host or self.headers.get("host") or parts.hostname or "").lower()
        self.remote_addr = remote_addr

    def read_body(self, limit: int | None = None) -> bytes:
        """Read the whole body and close the stream.

        When *limit* is set, at most ``limit + 1`` bytes are read so callers
        can detect an oversized payload without buffering all of it.
        """
        try:
            if limit is None:
                return self.body.read()
            return self.body.read(limit + 1)
        finally:
            self.body.close()

    def __repr__(self) -> str:
        return f"Request({self.method} {self.url} host={self.host!r})"


def _strip_port(host: str) -> str:
    if host.startswith("["):
        end = host.find("]")
        return host[1:end] if end != -1 else host
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host


class ResponseWriter(Protocol):
    """Outbound response sink used by handlers.

    Headers must be set before :meth:`write_header`; the first
    :meth:`write` implies a 200 status when none was written.
    """

    def header(self) -> Headers:
        ...

    def write_header(self, status: int) -> None:
        ...

    def write(self, data: bytes) -> int:
        ...


class ResponseRecorder:
    """In-memory :class:`ResponseWriter` recording status, headers and body."""

    def __init__(self) -> None:
        self._headers = Headers()
        self.status_code: int | None = None
        self.headers_snapshot: Headers | None = None
        self._body = bytearray()

    def header(self) -> Headers:
        return self._headers

    def write_header(self, status: int) -> None:
        if self.status_code is not None:
            return
        self.status_code = status
        self.headers_snapshot = Headers(self._headers)

    def write(self, data: bytes) -> int:
        if self.status_code is None:
            self.write_header(HTTP_200_OK)
        self._body.extend(data)
        return len(data)

    @property
    def code(self) -> int:
        """Status sent so far, 200 when nothing was written."""
        return self.status_code if self.status_code is not None else HTTP_200_OK

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    @property
    def sent_headers(self) -> Headers:
        """Headers as they were when the status line was committed."""
        if self.headers_snapshot is None:
            return Headers(self._headers)
        return self.headers_snapshot


def status_line(status: int) -> str:
    """Return ``"<code> <reason>"`` for *status*."""
    try:
        phrase = HTTPStatus(status).phrase
    except ValueError:
        phrase = "Unknown"
    return f"{status} {phrase}"


Handler = Callable[[ResponseWriter, Request], None]


__all__ = [
    "HTTP_200_OK",
    "HTTP_400_BAD_REQUEST",
    "HTTP_401_UNAUTHORIZED",
    "HTTP_500_INTERNAL_SERVER_ERROR",
    "Handler",
    "Headers",
    "Request",
    "ResponseRecorder",
    "ResponseWriter",
    "status_line",
]
