"""Per-process cache of the global notification settings.

Reads go through ``get_global_settings()``, which serves a frozen snapshot
for up to ``GLOBAL_SETTINGS_CACHE_TTL`` seconds (default 60) before
reloading from the repository. ``UpdateGlobalSettings`` invalidates the
cache of the process that handled it; other processes pick the change up
when their TTL lapses. A TTL of 0 disables caching.
"""

import os
import time
from dataclasses import dataclass, field

import structlog
from notifications.notification_types import GLOBAL_FLAGS, parse_notification_type
from notifications.settings.settings import GLOBAL_SETTINGS_KEY, GlobalNotificationSettings
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class GlobalSettingsSnapshot:
    """Immutable copy of the settings record taken at load time."""

    flags: dict[str, bool] = field(default_factory=dict)
    weekly_report_day: int = 0
    weekly_report_time: str = "09:00"

    @classmethod
    def from_aggregate(cls, settings: GlobalNotificationSettings) -> "GlobalSettingsSnapshot":
        return cls(
            flags={flag: bool(getattr(settings, flag)) for flag in GLOBAL_FLAGS.values() if flag},
            weekly_report_day=settings.weekly_report_day,
            weekly_report_time=settings.weekly_report_time,
        )

    def is_type_enabled(self, notification_type) -> bool:
        flag = GLOBAL_FLAGS[parse_notification_type(notification_type)]
        return True if flag is None else self.flags.get(flag, True)


def load_or_create_global_settings() -> GlobalNotificationSettings:
    """Fetch the settings record, creating it with defaults on first use."""
    repo = current_domain.repository_for(GlobalNotificationSettings)
    try:
        return repo.get(GLOBAL_SETTINGS_KEY)
    except ObjectNotFoundError:
        settings = GlobalNotificationSettings.create_default()
        repo.add(settings)
        logger.info("Global notification settings created with defaults")
        return settings


class GlobalSettingsCache:
    def __init__(self, ttl_seconds: float):
        self.ttl_seconds = ttl_seconds
        self._snapshot: GlobalSettingsSnapshot | None = None
        self._loaded_at: float = 0.0

    def get(self) -> GlobalSettingsSnapshot:
        if self._snapshot is None or self._is_stale():
            self._snapshot = GlobalSettingsSnapshot.from_aggregate(load_or_create_global_settings())
            self._loaded_at = time.monotonic()
        return self._snapshot

    def invalidate(self) -> None:
        self._snapshot = None
        self._loaded_at = 0.0

    def _is_stale(self) -> bool:
        return time.monotonic() - self._loaded_at >= self.ttl_seconds


_cache = GlobalSettingsCache(ttl_seconds=float(os.environ.get("GLOBAL_SETTINGS_CACHE_TTL", "60")))


def get_global_settings() -> GlobalSettingsSnapshot:
    """Return the cached global settings, reloading when stale."""
    return _cache.get()


def invalidate_global_settings() -> None:
    """Drop the cached snapshot so the next read hits the repository."""
    _cache.invalidate()
