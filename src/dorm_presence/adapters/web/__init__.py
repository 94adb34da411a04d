"""Web adapters."""

from dorm_presence.adapters.web.api import DormPresenceApi, create_app
from dorm_presence.adapters.web.server import WebServer

__all__ = ["DormPresenceApi", "WebServer", "create_app"]
