"""Serve a handler as a WSGI application."""

from __future__ import annotations

import io
from typing import Any, Callable, Iterable, Mapping

from .http import Handler, Request, ResponseRecorder, status_line

StartResponse = Callable[..., Any]


def request_from_environ(environ: Mapping[str, Any]) -> Request:
    """Build a :class:`Request` from a WSGI *environ*.

    Reads exactly ``CONTENT_LENGTH`` bytes from ``wsgi.input``, or the whole
    stream when the length is absent and the server sets
    ``wsgi.input_terminated``. The server keeps ownership of that stream.
    """
    headers = {
        key[5:].replace("_", "-"): str(value)
        for key, value in environ.items()
        if key.startswith("HTTP_")
    }
    for key in ("CONTENT_TYPE", "CONTENT_LENGTH"):
        if environ.get(key):
            headers[key.replace("_", "-")] = str(environ[key])

    stream = environ.get("wsgi.input")
    declared = environ.get("CONTENT_LENGTH")
    try:
        length = int(declared or 0)
    except ValueError:
        length = 0
    if stream is None:
        body = b""
    elif not declared and environ.get("wsgi.input_terminated"):
        body = stream.read()
    else:
        body = stream.read(length) if length > 0 else b""

    path = str(environ.get("SCRIPT_NAME", "")) + str(environ.get("PATH_INFO", "")) or "/"
    query = str(environ.get("QUERY_STRING", ""))
    return Request(
        method=str(environ.get("REQUEST_METHOD", "GET")),
        url=f"{path}?{query}" if query else path,
        body=io.BytesIO(body),
        headers=headers,
        host=str(environ.get("HTTP_HOST") or environ.get("SERVER_NAME", "")),
        remote_addr=str(environ.get("REMOTE_ADDR", "")),
    )


class WSGIAdapter:
    """WSGI application dispatching every request to *handler*."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler

    def __call__(self, environ: Mapping[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        request = request_from_environ(environ)
        recorder = ResponseRecorder()
        self.handler(recorder, request)
        start_response(status_line(recorder.code), list(recorder.sent_headers.items()))
        return [recorder.body]


__all__ = ["WSGIAdapter", "request_from_environ"]
