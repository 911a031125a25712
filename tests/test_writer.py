"""TrackedWriter passes everything through and remembers non-200 statuses."""

from jsonhandler.http import ResponseRecorder
from jsonhandler.writer import TrackedWriter


def test_passthrough() -> None:
    sink = ResponseRecorder()
    w = TrackedWriter(sink)
    w.header().set("X-Test", "1")
    assert w.write(b"hello") == 5
    assert sink.code == 200
    assert sink.body == b"hello"
    assert sink.sent_headers["x-test"] == "1"
    assert not w.skip_response


def test_ok_status_does_not_flag() -> None:
    w = TrackedWriter(ResponseRecorder())
    w.write_header(200)
    assert not w.skip_response


def test_non_ok_status_flags() -> None:
    sink = ResponseRecorder()
    w = TrackedWriter(sink)
    w.write_header(401)
    assert w.skip_response
    assert sink.code == 401


def test_flag_is_sticky() -> None:
    w = TrackedWriter(ResponseRecorder())
    w.write_header(302)
    w.write_header(200)
    assert w.skip_response
