"""Settings loaded from JSONHANDLER_* environment variables."""

import pytest

from jsonhandler.config import Settings, load_settings
from jsonhandler.http import Request


def test_defaults() -> None:
    settings = load_settings({})
    assert settings == Settings()
    assert settings.trusted_hosts == frozenset({"localhost"})
    assert settings.error_id_header == "X-Errid"
    assert settings.max_body_bytes is None


def test_reads_process_environment(monkeypatch) -> None:
    monkeypatch.setenv("JSONHANDLER_ERROR_ID_HEADER", "X-Trace")
    assert load_settings().error_id_header == "X-Trace"


def test_custom_values() -> None:
    settings = load_settings(
        {
            "JSONHANDLER_TRUSTED_HOSTS": "Localhost, internal.example ,",
            "JSONHANDLER_SHOW_INTERNAL_ERRORS": "ALWAYS",
            "JSONHANDLER_SHOW_BAD_REQUEST_ERRORS": "trusted",
            "JSONHANDLER_MAX_BODY_BYTES": "1024",
        }
    )
    assert settings.trusted_hosts == frozenset({"localhost", "internal.example"})
    assert settings.show_internal_errors == "always"
    assert settings.show_bad_request_errors == "trusted"
    assert settings.max_body_bytes == 1024


def test_empty_trusted_hosts_trusts_nobody() -> None:
    settings = load_settings({"JSONHANDLER_TRUSTED_HOSTS": ""})
    assert not settings.is_trusted(Request(host="localhost"))


@pytest.mark.parametrize(
    "env, match",
    [
        ({"JSONHANDLER_SHOW_INTERNAL_ERRORS": "sometimes"}, "JSONHANDLER_SHOW_INTERNAL_ERRORS"),
        ({"JSONHANDLER_SHOW_BAD_REQUEST_ERRORS": "never"}, "JSONHANDLER_SHOW_BAD_REQUEST_ERRORS"),
        ({"JSONHANDLER_MAX_BODY_BYTES": "lots"}, "JSONHANDLER_MAX_BODY_BYTES"),
        ({"JSONHANDLER_MAX_BODY_BYTES": "0"}, "JSONHANDLER_MAX_BODY_BYTES"),
    ],
)
def test_invalid_values(env, match) -> None:
    with pytest.raises(ValueError, match=match):
        load_settings(env)


def test_policies() -> None:
    local = Request(host="localhost")
    remote = Request(host="example.com")

    trusted = Settings().internal_error_policy()
    assert trusted(local) and not trusted(remote)

    never = Settings(show_internal_errors="never").internal_error_policy()
    assert not never(local)

    always = Settings().bad_request_policy()
    assert always(local) and always(remote)
