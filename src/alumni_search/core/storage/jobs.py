"""Persisted cache of job postings and their precomputed embeddings."""

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Iterator

from loguru import logger

from alumni_search.core.errors import PersistenceError
from alumni_search.core.models import JobIndexEntry
from alumni_search.embedding.base import EmbeddingFunction
from alumni_search.utils.serialization import dump_json_atomic, load_json_list


class JobEmbeddingCache:
    """Job postings in file order, with embeddings filled in by an explicit pass.

    Entries arrive from an external ingestion step and may lack an id or share
    a title, so they are kept as a list rather than keyed. Items that cannot
    be parsed are not ranked but are written back unchanged after the parsed
    jobs. fill() computes the missing embeddings with a bounded worker pool
    and rewrites the whole file once.
    """

    def __init__(self, persist_path: str | Path) -> None:
        self._lock = threading.RLock()
        self._persist_path = Path(persist_path)
        self._entries: list[JobIndexEntry] = []
        self._unparsed: list[Any] = []
        self.load()

    @property
    def persist_path(self) -> Path:
        return self._persist_path

    def load(self) -> None:
        """Reload entries from disk. Unreadable files leave the cache empty."""
        with self._lock:
            self._entries = []
            self._unparsed = []
            try:
                raw = load_json_list(self._persist_path)
            except PersistenceError as e:
                logger.warning(f"Could not load job index, starting empty: {e}")
                return

            for item in raw:
                try:
                    entry = JobIndexEntry.from_dict(item)
                except (KeyError, TypeError, ValueError):
                    self._unparsed.append(item)
                    continue
                self._entries.append(entry)
            if self._unparsed:
                logger.warning(
                    f"Ignoring {len(self._unparsed)} malformed jobs in "
                    f"{self._persist_path}"
                )

    def entries(self) -> list[JobIndexEntry]:
        with self._lock:
            return list(self._entries)

    def add(self, entry: JobIndexEntry) -> None:
        """Replace the job with the same non-empty id, else append.

        Not persisted until save().
        """
        with self._lock:
            if entry.id:
                for i, existing in enumerate(self._entries):
                    if existing.id == entry.id:
                        self._entries[i] = entry
                        return
            self._entries.append(entry)

    def needs_embedding(self) -> list[JobIndexEntry]:
        with self._lock:
            return [e for e in self._entries if e.needs_embedding]

    def fill(self, embedding_func: EmbeddingFunction, workers: int = 4) -> int:
        """Compute missing embeddings, then save once if anything changed.

        All embeddings are computed before any entry is updated, so a
        provider failure leaves the cache untouched.

        Returns:
            Number of embeddings computed

        Raises:
            EmbeddingError: If any embedding call fails
            PersistenceError: If the cache cannot be written
        """
        pending = [e for e in self.needs_embedding() if e.embedding_text.strip()]
        if not pending:
            return 0

        logger.info(f"Computing embeddings for {len(pending)} cached jobs")
        with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
            vectors = list(
                pool.map(lambda e: embedding_func.embed(e.embedding_text), pending)
            )

        with self._lock:
            for entry, vector in zip(pending, vectors):
                entry.embedding = vector
            self.save()
        return len(pending)

    def save(self) -> None:
        """Rewrite the whole cache file.

        Raises:
            PersistenceError: If the file cannot be written
        """
        with self._lock:
            payload = [entry.to_dict() for entry in self._entries]
            payload.extend(self._unparsed)
            dump_json_atomic(self._persist_path, payload)
        logger.debug(f"Saved {len(payload)} jobs to {self._persist_path}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[JobIndexEntry]:
        return iter(self.entries())
