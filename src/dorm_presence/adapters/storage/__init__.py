"""Document store adapters."""

from dorm_presence.adapters.storage.document_repositories import (
    DocumentLocationRepository,
    DocumentNotificationRepository,
    DocumentScanEventRepository,
    DocumentUserRepository,
)
from dorm_presence.adapters.storage.document_store import DocumentNotFoundError, DocumentStore

__all__ = [
    "DocumentLocationRepository",
    "DocumentNotFoundError",
    "DocumentNotificationRepository",
    "DocumentScanEventRepository",
    "DocumentStore",
    "DocumentUserRepository",
]
