"""In-memory vector index with JSON file persistence.

Records live in a dict keyed by record key; the file on disk is only
brought in sync by an explicit save().
"""

import threading
from pathlib import Path
from typing import Any, Iterable, Iterator

from loguru import logger

from alumni_search.core.errors import PersistenceError, ValidationError
from alumni_search.core.models import SearchHit, VectorRecord
from alumni_search.core.storage.vector import VectorStore
from alumni_search.core.utils import cosine_similarity
from alumni_search.utils.serialization import (
    dump_json_atomic,
    load_json_list,
    remove_file,
)


class JsonVectorStore(VectorStore):
    """Exact cosine-similarity index backed by a flat JSON file.

    Search is a linear scan over every stored record. Mutations and saves
    take a lock so the map is never changed while it is being written out.

    Two concurrent index() calls for the same key race: whichever upsert runs
    last wins. There is no versioning.
    """

    def __init__(
        self,
        persist_path: str | Path | None = None,
        strict_dimension: bool = False,
    ) -> None:
        self._lock = threading.RLock()
        self._records: dict[str, VectorRecord] = {}
        self._persist_path = Path(persist_path) if persist_path else None
        self._strict_dimension = strict_dimension
        self._load()

    @property
    def persist_path(self) -> Path | None:
        return self._persist_path

    @property
    def dimension(self) -> int | None:
        """Vector length of the first stored record, None when empty."""
        with self._lock:
            for record in self._records.values():
                return record.dimension
            return None

    def _load(self) -> None:
        if self._persist_path is None:
            return
        try:
            raw = load_json_list(self._persist_path)
        except PersistenceError as e:
            logger.warning(f"Could not load vector store, starting empty: {e}")
            return

        skipped = 0
        for item in raw:
            try:
                record = VectorRecord.from_dict(item)
            except (KeyError, TypeError, ValueError):
                skipped += 1
                continue
            self._records[record.key] = record

        if skipped:
            logger.warning(
                f"Skipped {skipped} malformed records in {self._persist_path}"
            )
        if self._records:
            logger.info(
                f"Loaded {len(self._records)} vectors from {self._persist_path}"
            )

    def _check_dimension(self, record: VectorRecord) -> None:
        current = self.dimension
        if current is None or record.dimension == current:
            return
        existing = self._records.get(record.key)
        if existing is not None and len(self._records) == 1:
            return
        message = (
            f"vector for {record.key} has length {record.dimension}, "
            f"store holds length {current}"
        )
        if self._strict_dimension:
            raise ValidationError(message)
        logger.warning(f"Dimension drift: {message}")

    def index(self, record: VectorRecord) -> None:
        with self._lock:
            self._check_dimension(record)
            self._records[record.key] = record

    def bulk_index(self, records: Iterable[VectorRecord]) -> int:
        with self._lock:
            return super().bulk_index(records)

    def search_by_vector(
        self,
        query: list[float],
        top_k: int = 10,
        filter_type: str | None = None,
    ) -> list[SearchHit]:
        if top_k <= 0:
            return []

        with self._lock:
            candidates = list(self._records.values())

        hits: list[SearchHit] = []
        mismatched = 0
        for record in candidates:
            if filter_type and record.type != filter_type:
                continue
            if record.dimension != len(query):
                mismatched += 1
                score = 0.0
            else:
                score = cosine_similarity(query, record.vector)
            hits.append(
                SearchHit(
                    key=record.key,
                    id=record.id,
                    type=record.type,
                    meta=record.meta,
                    score=score,
                )
            )

        if mismatched:
            logger.warning(
                f"{mismatched} stored vectors do not match query length "
                f"{len(query)}; scored as 0"
            )

        # sort() is stable, so ties keep insertion order
        hits.sort(key=lambda h: h.score, reverse=True)
        return hits[:top_k]

    def get(self, key: str) -> VectorRecord | None:
        with self._lock:
            return self._records.get(key)

    def records(self) -> Iterator[VectorRecord]:
        with self._lock:
            yield from list(self._records.values())

    def save(self) -> None:
        """Write the whole collection to disk.

        Raises:
            PersistenceError: If the file cannot be written
        """
        if self._persist_path is None:
            return
        with self._lock:
            payload = [record.to_dict() for record in self._records.values()]
            dump_json_atomic(self._persist_path, payload)
        logger.debug(f"Saved {len(payload)} vectors to {self._persist_path}")

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            if self._persist_path is not None:
                remove_file(self._persist_path)
        logger.info("Cleared vector store")

    def stats(self) -> dict[str, Any]:
        """Get index statistics."""
        with self._lock:
            by_type: dict[str, int] = {}
            for record in self._records.values():
                by_type[record.type] = by_type.get(record.type, 0) + 1
            return {
                "total_records": len(self._records),
                "by_type": by_type,
                "dimension": self.dimension,
                "persist_path": str(self._persist_path) if self._persist_path else None,
                "storage_exists": bool(
                    self._persist_path and self._persist_path.exists()
                ),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._records

    def close(self) -> None:
        self.save()
