"""Response writer that notices when a handler commits its own status."""

from __future__ import annotations

from .http import HTTP_200_OK, Headers, ResponseWriter


class TrackedWriter:
    """Wrap a :class:`ResponseWriter` for the lifetime of one request.

    Behaves exactly like the wrapped sink. Writing any status other than
    200 sets :attr:`skip_response`, which stays set for the rest of the
    request.
    """

    def __init__(self, sink: ResponseWriter) -> None:
        self.sink = sink
        self.skip_response = False

    def header(self) -> Headers:
        return self.sink.header()

    def write_header(self, status: int) -> None:
        self.sink.write_header(status)
        if status != HTTP_200_OK:
            self.skip_response = True

    def write(self, data: bytes) -> int:
        return self.sink.write(data)


__all__ = ["TrackedWriter"]
