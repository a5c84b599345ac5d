from __future__ import annotations

from collections.abc import Mapping
import os


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def env_str(name: str, *, default: str, environ: Mapping[str, str] | None = None) -> str:
    raw = _env(environ).get(name, "").strip()
    return raw or default


def env_int(name: str, *, default: int, minimum: int = 0, environ: Mapping[str, str] | None = None) -> int:
    raw = _env(environ).get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, value)


def env_bool(name: str, *, default: bool, environ: Mapping[str, str] | None = None) -> bool:
    raw = _env(environ).get(name, "").strip()
    if not raw:
        return default
    return _as_bool(raw)


def strict_approvals_required(environ: Mapping[str, str] | None = None) -> bool:
    return env_bool("TRADEDESK_STRICT_APPROVALS", default=False, environ=environ)


def max_body_bytes(environ: Mapping[str, str] | None = None) -> int:
    return env_int("TRADEDESK_MAX_BODY_BYTES", default=10 * 1024 * 1024, minimum=1, environ=environ)


def cors_allow_origins(environ: Mapping[str, str] | None = None) -> list[str]:
    raw = _env(environ).get("CORS_ALLOW_ORIGINS", "*")
    return [x.strip() for x in raw.split(",") if x.strip()]
