"""Seed data loader for the document store."""

import logging
import tomllib
from datetime import datetime
from pathlib import Path
from typing import Any

from dorm_presence.adapters.storage.document_store import (
    DORMS,
    RFID_LOGS,
    ROOMS,
    USERS,
    DocumentStore,
)

logger = logging.getLogger(__name__)

# TOML key -> document field, per seeded collection
_USER_FIELDS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "student_id": "studentId",
    "rfid_card": "rfidCard",
    "role": "role",
    "status": "status",
    "assigned_room": "assignedRoom",
    "assigned_building": "assignedBuilding",
    "managed_dorm_id": "managedDormId",
    "room_application_status": "roomApplicationStatus",
}
_ROOM_FIELDS = {"name": "name", "dorm_id": "dormId"}
_DORM_FIELDS = {"name": "name"}
_RFID_LOG_FIELDS = {
    "student_id": "studentId",
    "student_name": "studentName",
    "action": "action",
    "timestamp": "timestamp",
    "room": "room",
    "building": "building",
    "dorm_id": "dormId",
    "dorm_name": "dormName",
}


class SeedDataLoader:
    """Loads dorms, rooms, users and scan logs from a TOML file into the store."""

    @staticmethod
    def load(store: DocumentStore, seed_file: str | Path | None) -> int:
        """Load a seed file into the store.

        Args:
            store: Store to insert the documents into.
            seed_file: Path to the TOML seed file. Nothing is loaded if None.

        Returns:
            Number of documents loaded.

        Raises:
            FileNotFoundError: If the seed file does not exist.
            ValueError: If a section is not a list of tables.
        """
        if not seed_file:
            return 0

        seed_path = Path(seed_file)
        if not seed_path.exists():
            raise FileNotFoundError(f"Seed file not found: {seed_path}")

        with open(seed_path, "rb") as f:
            seed_data = tomllib.load(f)

        loaded = 0
        loaded += SeedDataLoader._load_section(store, seed_data, "dorms", DORMS, _DORM_FIELDS)
        loaded += SeedDataLoader._load_section(store, seed_data, "rooms", ROOMS, _ROOM_FIELDS)
        loaded += SeedDataLoader._load_section(store, seed_data, "users", USERS, _USER_FIELDS)
        loaded += SeedDataLoader._load_section(
            store, seed_data, "rfid_logs", RFID_LOGS, _RFID_LOG_FIELDS, generate_ids=True
        )
        logger.info(f"Loaded {loaded} seed document(s) from {seed_path}")
        return loaded

    @staticmethod
    def to_document(entry: dict[str, Any], fields: dict[str, str]) -> dict[str, Any]:
        """Map the known snake_case keys of a seed entry to document fields.

        Unquoted TOML datetimes are stored as wall-clock strings, the same
        form the scan service writes.
        """
        document: dict[str, Any] = {}
        for key, field in fields.items():
            if key not in entry:
                continue
            value = entry[key]
            if isinstance(value, datetime):
                value = value.strftime("%Y-%m-%d %H:%M:%S")
            document[field] = value
        return document

    @staticmethod
    def _load_section(
        store: DocumentStore,
        seed_data: dict[str, Any],
        section: str,
        collection: str,
        fields: dict[str, str],
        generate_ids: bool = False,
    ) -> int:
        entries = seed_data.get(section, [])
        if not isinstance(entries, list):
            raise ValueError(f"Seed section '{section}' must be a list")

        loaded = 0
        for position, entry in enumerate(entries):
            if not isinstance(entry, dict):
                logger.warning(f"Skipping {section}[{position}]: not a table")
                continue
            doc_id = entry.get("id")
            if not doc_id:
                if not generate_ids:
                    logger.warning(f"Skipping {section}[{position}]: missing 'id'")
                    continue
                doc_id = f"seed-{section}-{position}"
            store.put(collection, str(doc_id), SeedDataLoader.to_document(entry, fields))
            loaded += 1
        return loaded
