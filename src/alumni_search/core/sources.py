"""Lookup of live source records (users, jobs, news) owned by the CRUD layer."""

from typing import Any, Mapping, Protocol


class RecordSource(Protocol):
    """Fetches the authoritative record for an indexed entity.

    Implementations may raise on lookup failure; callers treat any failure
    as "record unavailable".
    """

    def get(self, record_type: str, record_id: str) -> dict[str, Any] | None:
        ...


class NullRecordSource:
    """Record source with nothing in it. Hits are returned without documents."""

    def get(self, record_type: str, record_id: str) -> dict[str, Any] | None:
        return None


class MappingRecordSource:
    """In-memory record source keyed by type, then id.

    Example:
        source = MappingRecordSource({"job": {"j1": {"title": "Data Analyst"}}})
        source.get("job", "j1")
    """

    def __init__(
        self, records: Mapping[str, Mapping[str, dict[str, Any]]] | None = None
    ) -> None:
        self._records: dict[str, dict[str, dict[str, Any]]] = {
            t: dict(by_id) for t, by_id in (records or {}).items()
        }

    def put(self, record_type: str, record_id: str, doc: dict[str, Any]) -> None:
        self._records.setdefault(record_type, {})[str(record_id)] = doc

    def get(self, record_type: str, record_id: str) -> dict[str, Any] | None:
        doc = self._records.get(record_type, {}).get(str(record_id))
        return dict(doc) if doc is not None else None
