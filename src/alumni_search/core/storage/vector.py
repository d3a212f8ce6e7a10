"""Vector index interface for similarity search."""

from abc import ABC, abstractmethod
from typing import Iterable

from alumni_search.core.models import SearchHit, VectorRecord


class VectorStore(ABC):
    """Abstract interface for vector index backends."""

    @abstractmethod
    def index(self, record: VectorRecord) -> None:
        """Upsert one record by its key."""
        ...

    def bulk_index(self, records: Iterable[VectorRecord]) -> int:
        """Upsert records in order; later duplicates win. Returns the count."""
        count = 0
        for record in records:
            self.index(record)
            count += 1
        return count

    @abstractmethod
    def search_by_vector(
        self,
        query: list[float],
        top_k: int = 10,
        filter_type: str | None = None,
    ) -> list[SearchHit]:
        """Return the top_k most similar records, highest score first."""
        ...

    @abstractmethod
    def get(self, key: str) -> VectorRecord | None:
        """Look up a record by key."""
        ...

    @abstractmethod
    def save(self) -> None:
        """Persist the full collection."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove all records, in memory and on disk."""
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    def close(self) -> None:
        """Clean up resources."""
        return None
