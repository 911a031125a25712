"""Environment-driven settings for JSON handlers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Mapping

from .http import Request

TrustPolicy = Callable[[Request], bool]

SHOW_NEVER = "never"
SHOW_TRUSTED = "trusted"
SHOW_ALWAYS = "always"

_INTERNAL_CHOICES = (SHOW_NEVER, SHOW_TRUSTED, SHOW_ALWAYS)
_BAD_REQUEST_CHOICES = (SHOW_TRUSTED, SHOW_ALWAYS)


@dataclass(frozen=True)
class Settings:
    """Policy knobs shared by every handler built from them."""

    trusted_hosts: frozenset[str] = frozenset({"localhost"})
    show_internal_errors: str = SHOW_TRUSTED
    show_bad_request_errors: str = SHOW_ALWAYS
    error_id_header: str = "X-Errid"
    max_body_bytes: int | None = None

    def is_trusted(self, request: Request) -> bool:
        return request.host in self.trusted_hosts

    def internal_error_policy(self) -> TrustPolicy:
        """Predicate deciding whether a 500 body may carry the error text."""
        return _policy(self.show_internal_errors, self.is_trusted)

    def bad_request_policy(self) -> TrustPolicy:
        """Predicate deciding whether a 400 body is emitted."""
        return _policy(self.show_bad_request_errors, self.is_trusted)


def _policy(mode: str, trusted: TrustPolicy) -> TrustPolicy:
    if mode == SHOW_ALWAYS:
        return always
    if mode == SHOW_NEVER:
        return never
    return trusted


def always(request: Request) -> bool:
    return True


def never(request: Request) -> bool:
    return False


def _choice(env: Mapping[str, str], name: str, default: str, choices: tuple[str, ...]) -> str:
    value = env.get(name, default).strip().lower() or default
    if value not in choices:
        raise ValueError(f"{name} must be one of {', '.join(choices)}")
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``JSONHANDLER_*`` environment variables."""
    env = os.environ if environ is None else environ
    hosts_value = env.get("JSONHANDLER_TRUSTED_HOSTS")
    if hosts_value is None:
        trusted_hosts = Settings.trusted_hosts
    else:
        trusted_hosts = frozenset(
            host.strip().lower() for host in hosts_value.split(",") if host.strip()
        )
    header = env.get("JSONHANDLER_ERROR_ID_HEADER", "").strip() or Settings.error_id_header

    max_body_bytes: int | None = None
    raw_limit = env.get("JSONHANDLER_MAX_BODY_BYTES", "").strip()
    if raw_limit:
        try:
            max_body_bytes = int(raw_limit)
        except ValueError as exc:
            raise ValueError(
                "JSONHANDLER_MAX_BODY_BYTES must be a positive integer"
            ) from exc
        if max_body_bytes <= 0:
            raise ValueError("JSONHANDLER_MAX_BODY_BYTES must be a positive integer")

    return Settings(
        trusted_hosts=trusted_hosts,
        show_internal_errors=_choice(
            env, "JSONHANDLER_SHOW_INTERNAL_ERRORS", SHOW_TRUSTED, _INTERNAL_CHOICES
        ),
        show_bad_request_errors=_choice(
            env, "JSONHANDLER_SHOW_BAD_REQUEST_ERRORS", SHOW_ALWAYS, _BAD_REQUEST_CHOICES
        ),
        error_id_header=header,
        max_body_bytes=max_body_bytes,
    )


__all__ = [
    "SHOW_ALWAYS",
    "SHOW_NEVER",
    "SHOW_TRUSTED",
    "Settings",
    "TrustPolicy",
    "always",
    "load_settings",
    "never",
]
