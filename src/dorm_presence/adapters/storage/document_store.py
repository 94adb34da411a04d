"""In-memory document store with optional JSON persistence."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

USERS = "users"
ROOMS = "rooms"
DORMS = "dorms"
RFID_LOGS = "rfidLogs"
STUDENT_NOTIFICATIONS = "studentNotifications"

COLLECTIONS = (USERS, ROOMS, DORMS, RFID_LOGS, STUDENT_NOTIFICATIONS)


class DocumentNotFoundError(KeyError):
    """Raised when updating a document that does not exist."""


class DocumentStore:
    """Collections of JSON-like documents keyed by id.

    Documents are copied on the way in and out, so callers never share
    mutable state with the store. Writes are serialized with an
    asyncio.Lock and, when a data file is configured, flushed to disk in a
    worker thread.
    """

    def __init__(self, data_file: str | Path | None = None) -> None:
        """Initialize an empty store.

        Args:
            data_file: Optional JSON file the store is loaded from and saved to.
        """
        self._collections: dict[str, dict[str, dict[str, Any]]] = {
            name: {} for name in COLLECTIONS
        }
        self._data_file = Path(data_file) if data_file else None
        self._lock = asyncio.Lock()

    def load(self) -> None:
        """Load collections from the data file if it exists."""
        if self._data_file is None or not self._data_file.exists():
            return

        with open(self._data_file, encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Data file {self._data_file} must contain a JSON object")

        for name, documents in data.items():
            if not isinstance(documents, dict):
                logger.warning(f"Ignoring collection '{name}' in {self._data_file}: not an object")
                continue
            self._collections.setdefault(name, {}).update(
                {doc_id: dict(doc) for doc_id, doc in documents.items() if isinstance(doc, dict)}
            )
        logger.info(
            f"Loaded {sum(len(c) for c in self._collections.values())} documents "
            f"from {self._data_file}"
        )

    def save(self) -> None:
        """Write all collections to the data file, if one is configured."""
        if self._data_file is None:
            return
        self._data_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._data_file.with_suffix(self._data_file.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._collections, f, indent=2, ensure_ascii=False)
        tmp_path.replace(self._data_file)

    def put(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Insert or replace a document without locking. Used for seeding."""
        self._collections.setdefault(collection, {})[doc_id] = dict(data)

    def count(self, collection: str) -> int:
        """Number of documents in a collection."""
        return len(self._collections.get(collection, {}))

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Get a document by id.

        The id is added under the ``"id"`` key unless the document has its own.
        """
        document = self._collections.get(collection, {}).get(doc_id)
        if document is None:
            return None
        return {"id": doc_id, **document}

    async def query(self, collection: str, **equals: Any) -> list[dict[str, Any]]:
        """List documents whose fields equal all the given values.

        Returns documents in insertion order, with ids added as in :meth:`get`.
        """
        return [
            {"id": doc_id, **document}
            for doc_id, document in self._collections.get(collection, {}).items()
            if all(document.get(field) == value for field, value in equals.items())
        ]

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        """Add a document under a generated id and return the id."""
        doc_id = uuid.uuid4().hex
        async with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = dict(data)
            await asyncio.to_thread(self.save)
        return doc_id

    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        async with self._lock:
            documents = self._collections.get(collection, {})
            if doc_id not in documents:
                raise DocumentNotFoundError(f"{collection}/{doc_id}")
            documents[doc_id] = {**documents[doc_id], **fields}
            await asyncio.to_thread(self.save)
