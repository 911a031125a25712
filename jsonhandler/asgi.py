"""Serve a handler as an ASGI application."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict

from .http import Handler, Request, ResponseRecorder

Scope = Dict[str, object]
Receive = Callable[[], Awaitable[Dict[str, object]]]
Send = Callable[[Dict[str, object]], Awaitable[None]]


def request_from_scope(scope: Scope, body: bytes) -> Request:
    """Build a :class:`Request` from an ASGI http *scope*."""
    raw_headers = scope.get("headers") or []
    headers = {
        bytes(k).decode("latin-1"): bytes(v).decode("latin-1")
        for k, v in raw_headers  # type: ignore[union-attr]
    }
    path = str(scope.get("path", "/"))
    query = bytes(scope.get("query_string", b"") or b"").decode("latin-1")  # type: ignore[arg-type]
    url = f"{path}?{query}" if query else path
    host = None
    server = scope.get("server")
    if not any(k.lower() == "host" for k in headers) and server:
        host = str(server[0])  # type: ignore[index]
    client = scope.get("client")
    remote_addr = str(client[0]) if client else ""  # type: ignore[index]
    return Request(
        method=str(scope.get("method", "GET")),
        url=url,
        body=body,
        headers=headers,
        host=host,
        remote_addr=remote_addr,
    )


class ASGIAdapter:
    """ASGI 3 application dispatching every http request to *handler*.

    The handler is synchronous and runs in a worker thread.
    """

    def __init__(self, handler: Handler) -> None:
        self.handler = handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
        elif scope["type"] == "http":
            await self._handle_http(scope, receive, send)
        else:
            raise NotImplementedError(f"Unsupported scope type {scope['type']}")

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def _handle_http(self, scope: Scope, receive: Receive, send: Send) -> None:
        body = bytearray()
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            body.extend(message.get("body", b"") or b"")  # type: ignore[arg-type]
            more_body = bool(message.get("more_body", False))

        request = request_from_scope(scope, bytes(body))
        recorder = ResponseRecorder()
        await asyncio.to_thread(self.handler, recorder, request)
        headers = [
            (key.encode("latin-1"), value.encode("latin-1"))
            for key, value in recorder.sent_headers.items()
        ]
        await send({"type": "http.response.start", "status": recorder.code, "headers": headers})
        await send({"type": "http.response.body", "body": recorder.body})


__all__ = ["ASGIAdapter", "request_from_scope"]
