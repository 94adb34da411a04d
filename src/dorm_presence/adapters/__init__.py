"""Adapters layer - external system integrations."""

from dorm_presence.adapters.config import AppConfig
from dorm_presence.adapters.storage import (
    DocumentLocationRepository,
    DocumentNotificationRepository,
    DocumentScanEventRepository,
    DocumentStore,
    DocumentUserRepository,
)
from dorm_presence.adapters.system_clock import SystemClock

__all__ = [
    "AppConfig",
    "DocumentLocationRepository",
    "DocumentNotificationRepository",
    "DocumentScanEventRepository",
    "DocumentStore",
    "DocumentUserRepository",
    "SystemClock",
]
