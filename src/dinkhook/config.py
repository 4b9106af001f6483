from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import FrozenSet, List, Mapping, Optional

import dotenv

ENV_PREFIX = "DINKHOOK_"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000
DEFAULT_WEBHOOK_PATH = "/dink"
DEFAULT_QUEUE_MAXSIZE = 100
DEFAULT_HISTORY_SIZE = 500
DEFAULT_DEDUP_WINDOW = 30
# Discord's default upload limit, which is what the plugin resizes screenshots for
DEFAULT_MAX_ATTACHMENT_BYTES = 8 * 1024 * 1024
# NOTE: In prod, keep keys in secure secret store
DEFAULT_TOKEN_SECRET = "dev-secret-key-please-change"

DISPATCH_MODES = ("inline", "queued")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    webhook_path: str = DEFAULT_WEBHOOK_PATH
    dispatch_mode: str = "inline"
    queue_maxsize: int = DEFAULT_QUEUE_MAXSIZE
    workers: int = 1
    history_size: int = DEFAULT_HISTORY_SIZE
    dedup_window_seconds: float = DEFAULT_DEDUP_WINDOW
    max_attachment_bytes: int = DEFAULT_MAX_ATTACHMENT_BYTES
    require_token: bool = False
    token_secret: str = DEFAULT_TOKEN_SECRET
    allowed_account_hashes: FrozenSet[str] = field(default_factory=frozenset)
    log_level: str = "INFO"
    # None keeps DINKHOOK_LOG_DIR from the process environment; "" disables file logging
    log_dir: Optional[str] = None
    # bearer key for POST /admin/tokens; the route is off while this is empty
    admin_key: str = ""

    def __post_init__(self):
        errors = validate(self)
        if errors:
            raise ValueError("invalid dinkhook settings:\n" + "\n".join(f"  - {e}" for e in errors))

    @property
    def queued(self) -> bool:
        return self.dispatch_mode == "queued"


def validate(settings: Settings) -> List[str]:
    """Return a list of human readable problems with ``settings`` (empty when valid)."""
    errors = []
    if not isinstance(settings.port, int) or not 1 <= settings.port <= 65535:
        errors.append(f"port must be an integer in 1-65535, got {settings.port!r}")
    if not settings.webhook_path.startswith("/"):
        errors.append(f"webhook_path must start with '/', got {settings.webhook_path!r}")
    if settings.dispatch_mode not in DISPATCH_MODES:
        errors.append(f"dispatch_mode must be one of {DISPATCH_MODES}, got {settings.dispatch_mode!r}")
    for name in ("queue_maxsize", "workers", "history_size", "max_attachment_bytes"):
        value = getattr(settings, name)
        if not isinstance(value, int) or value < 1:
            errors.append(f"{name} must be a positive integer, got {value!r}")
    if settings.dedup_window_seconds < 0:
        errors.append(f"dedup_window_seconds must be >= 0, got {settings.dedup_window_seconds!r}")
    if settings.require_token and not settings.token_secret:
        errors.append("token_secret is required when require_token is enabled")
    if not isinstance(logging.getLevelName(settings.log_level), int):
        errors.append(f"log_level must be a logging level name, got {settings.log_level!r}")
    return errors


def _parse_bool(name: str, raw: str) -> bool:
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")


def _parse_number(name: str, raw: str, kind=int):
    try:
        return kind(raw.strip())
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from None


def load_settings(env: Optional[Mapping[str, str]] = None, dotenv_path: Optional[str] = ".env") -> Settings:
    """Build Settings from ``DINKHOOK_*`` variables.

    When ``env`` is None the process environment is used, after loading
    ``dotenv_path`` (existing variables win over the file).
    """
    if env is None:
        if dotenv_path:
            dotenv.load_dotenv(dotenv_path)
        env = os.environ

    def get(name: str) -> Optional[str]:
        return env.get(ENV_PREFIX + name)

    kwargs = {}
    for name, attr in (
        ("HOST", "host"),
        ("WEBHOOK_PATH", "webhook_path"),
        ("TOKEN_SECRET", "token_secret"),
        ("ADMIN_KEY", "admin_key"),
        ("LOG_DIR", "log_dir"),
    ):
        if get(name) is not None:
            kwargs[attr] = get(name)
    if get("DISPATCH_MODE") is not None:
        kwargs["dispatch_mode"] = get("DISPATCH_MODE").strip().lower()
    if get("LOG_LEVEL") is not None:
        kwargs["log_level"] = get("LOG_LEVEL").strip().upper()
    for name, attr in (
        ("PORT", "port"),
        ("QUEUE_MAXSIZE", "queue_maxsize"),
        ("WORKERS", "workers"),
        ("HISTORY_SIZE", "history_size"),
        ("MAX_ATTACHMENT_BYTES", "max_attachment_bytes"),
    ):
        if get(name) is not None:
            kwargs[attr] = _parse_number(name, get(name))
    if get("DEDUP_WINDOW_SECONDS") is not None:
        kwargs["dedup_window_seconds"] = _parse_number("DEDUP_WINDOW_SECONDS", get("DEDUP_WINDOW_SECONDS"), float)
    if get("REQUIRE_TOKEN") is not None:
        kwargs["require_token"] = _parse_bool("REQUIRE_TOKEN", get("REQUIRE_TOKEN"))
    if get("ALLOWED_ACCOUNT_HASHES") is not None:
        kwargs["allowed_account_hashes"] = frozenset(
            h.strip() for h in get("ALLOWED_ACCOUNT_HASHES").split(",") if h.strip()
        )
    return Settings(**kwargs)
