"""Simple in-memory HTTP client for handlers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

from .http import Handler, Headers, Request, ResponseRecorder


@dataclass
class Response:
    """Container for HTTP response data."""

    status_code: int
    text: str
    headers: Headers
    content: bytes

    def json(self) -> Any:
        """Return the body parsed as JSON."""
        return json.loads(self.text)


class TestClient:
    """Execute requests against a handler without a server."""

    __test__ = False  # prevent Pytest from treating this as a test case

    def __init__(self, handler: Handler, *, host: str = "testserver") -> None:
        self.handler = handler
        self.host = host

    def request(
        self,
        method: str,
        path: str = "/",
        *,
        json_body: Any = None,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        host: str | None = None,
    ) -> Response:
        """Send an HTTP request and return the response."""
        if body is not None and json_body is not None:
            raise ValueError("provide either json_body or body")
        if body is None:
            body = json.dumps(json_body).encode() if json_body is not None else b""
        request = Request(
            method=method,
            url=path,
            body=body,
            headers=headers,
            host=host or self.host,
            remote_addr="127.0.0.1",
        )
        recorder = ResponseRecorder()
        self.handler(recorder, request)
        content = recorder.body
        return Response(
            recorder.code,
            content.decode("utf-8", errors="replace"),
            recorder.sent_headers,
            content,
        )

    def get(self, path: str = "/", **kwargs: Any) -> Response:
        """Send a GET request."""
        return self.request("GET", path, **kwargs)

    def post(self, path: str = "/", json_body: Any = None, **kwargs: Any) -> Response:
        """Send a POST request."""
        return self.request("POST", path, json_body=json_body, **kwargs)


__all__ = ["Response", "TestClient"]
