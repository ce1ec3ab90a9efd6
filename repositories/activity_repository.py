"""
Activity repository (persistence).

Append and read operations for the append-only activity log. Entries are never
updated or deleted.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from domain.activity import ActivityLogEntry, ActivityType
from domain.time import parse_utc_datetime, to_iso_utc
from repositories.document_store import ACTIVITIES, Document, DocumentStore, Namespace


def activity_to_document(entry: ActivityLogEntry) -> dict[str, Any]:
    return {
        "timestamp": to_iso_utc(entry.timestamp, name="timestamp"),
        "type": entry.type.value,
        "description": entry.description,
        "details": dict(entry.details),
    }


def document_to_activity(doc: Mapping[str, Any]) -> ActivityLogEntry:
    return ActivityLogEntry(
        entry_id=str(doc["id"]),
        type=ActivityType(str(doc["type"])),
        description=str(doc.get("description", "")),
        timestamp=parse_utc_datetime(doc["timestamp"]),
        details=dict(doc.get("details") or {}),
    )


def documents_to_activity(docs: List[Document]) -> List[ActivityLogEntry]:
    """Convert raw documents to entries, newest first."""

    entries = [document_to_activity(doc) for doc in docs]
    return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)


def append_activity(store: DocumentStore, namespace: Namespace, entry: ActivityLogEntry) -> None:
    store.write(namespace.collection(ACTIVITIES), entry.entry_id, activity_to_document(entry))


def list_activity(store: DocumentStore, namespace: Namespace) -> List[ActivityLogEntry]:
    return documents_to_activity(store.read(namespace.collection(ACTIVITIES)))


__all__ = [
    "activity_to_document",
    "append_activity",
    "document_to_activity",
    "documents_to_activity",
    "list_activity",
]
