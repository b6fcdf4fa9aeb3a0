from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from .constants import DEFAULT_API_BASE, DEFAULT_AUDIT_LOG_REASON
from .enforcement.models import SlotKind


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_optional_int(name: str) -> Optional[int]:
    value = _get_int(name, 0)
    return value or None


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "y", "on"}


def _get_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip() or default


@dataclass(frozen=True)
class Settings:
    token: str
    sync_guild_id: int = 0
    sqlite_path: str = "voicecontrol.sqlite3"
    log_level: str = "INFO"
    api_base: str = DEFAULT_API_BASE
    http_timeout_seconds: float = 10.0
    audit_log_reason: str = DEFAULT_AUDIT_LOG_REASON
    # Mod-log channel for enforcement notifications; None logs only.
    notify_channel_id: Optional[int] = None
    notify_on_success: bool = True
    shutdown_drain_seconds: float = 5.0
    # Seed bindings, used only for slots the store has never saved.
    seed_targets: dict[SlotKind, Optional[int]] = field(default_factory=dict)


def load_settings() -> Settings:
    token = os.getenv("DISCORD_TOKEN", "").strip()
    if not token:
        raise RuntimeError("DISCORD_TOKEN is required")
    return Settings(
        token=token,
        sync_guild_id=_get_int("SYNC_GUILD_ID", 0),
        sqlite_path=_get_str("SQLITE_PATH", "voicecontrol.sqlite3"),
        log_level=_get_str("LOG_LEVEL", "INFO"),
        api_base=_get_str("DISCORD_API_BASE", DEFAULT_API_BASE),
        http_timeout_seconds=_get_float("HTTP_TIMEOUT_SECONDS", 10.0),
        audit_log_reason=_get_str("AUDIT_LOG_REASON", DEFAULT_AUDIT_LOG_REASON),
        notify_channel_id=_get_optional_int("NOTIFY_CHANNEL_ID"),
        notify_on_success=_get_bool("NOTIFY_ON_SUCCESS", True),
        shutdown_drain_seconds=_get_float("SHUTDOWN_DRAIN_SECONDS", 5.0),
        seed_targets={kind: _get_optional_int(kind.config_key.upper()) for kind in SlotKind},
    )
