"""Semantic search over the vector index."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable

from loguru import logger

from alumni_search.core.config import SearchConfig
from alumni_search.core.errors import ValidationError
from alumni_search.core.models import RecordMeta, SearchResult, VectorRecord
from alumni_search.core.sources import NullRecordSource, RecordSource
from alumni_search.core.storage.vector import VectorStore
from alumni_search.embedding.base import EmbeddingFunction


class SemanticSearchService:
    """Embeds text and ranks indexed entities by cosine similarity.

    Combines three collaborators:
    - EmbeddingFunction: turns query and document text into vectors
    - VectorStore: holds the indexed vectors and ranks them
    - RecordSource: fetches the live record behind each hit

    Indexing is durable on return: every index call ends with an explicit
    save of the vector store.

    Example:
        service = SemanticSearchService(
            embedding_func=OpenAIEmbedding.from_settings(),
            vector_store=JsonVectorStore("data/vector-store.json"),
        )
        service.index("j1", "job", "Senior Python developer", {"title": "Python Dev"})
        results = service.search("python backend", filter_type="job")
    """

    def __init__(
        self,
        embedding_func: EmbeddingFunction,
        vector_store: VectorStore,
        records: RecordSource | None = None,
        config: SearchConfig | None = None,
    ) -> None:
        self.config = config or SearchConfig()
        self._embedding_func = embedding_func
        self._vector_store = vector_store
        self._records = records or NullRecordSource()

    @property
    def embedding_func(self) -> EmbeddingFunction:
        return self._embedding_func

    @property
    def vector_store(self) -> VectorStore:
        return self._vector_store

    def search(
        self,
        query_text: str,
        top_k: int | None = None,
        filter_type: str | None = None,
    ) -> list[SearchResult]:
        """Find the indexed entities most similar to query_text.

        Hits are never filtered by score here. An empty index is a success
        with no results.

        Raises:
            ValidationError: If query_text is empty
            EmbeddingError: If the query cannot be embedded
        """
        if not query_text or not query_text.strip():
            raise ValidationError("query text is required")

        k = self.config.clamp_top_k(top_k)
        query_vector = self._embedding_func.embed(query_text)
        hits = self._vector_store.search_by_vector(
            query_vector, top_k=k, filter_type=filter_type or None
        )
        return [
            SearchResult(
                id=hit.id,
                type=hit.type,
                score=hit.score,
                meta=hit.meta,
                doc=self._fetch(hit.type, hit.id),
            )
            for hit in hits
        ]

    def _fetch(self, record_type: str, record_id: str) -> dict[str, Any] | None:
        """Best-effort lookup of the live record; failures yield None."""
        try:
            return self._records.get(record_type, record_id)
        except Exception as e:
            logger.warning(f"Could not fetch {record_type}:{record_id}: {e}")
            return None

    def index(
        self,
        id: str,
        type: str,
        text: str,
        meta: RecordMeta | dict[str, Any] | None = None,
        key: str | None = None,
    ) -> VectorRecord:
        """Embed text and upsert it under (type, id), then save.

        Raises:
            ValidationError: If id, type or text is missing
            EmbeddingError: If the text cannot be embedded
            PersistenceError: If the index cannot be saved
        """
        if not id or not type or not text or not str(text).strip():
            raise ValidationError("id, type and text are required")

        vector = self._embedding_func.embed(str(text))
        record = VectorRecord(
            id=str(id), type=str(type), vector=vector, meta=meta or {}, key=key or ""
        )
        self._vector_store.index(record)
        self._vector_store.save()
        return record

    def index_bulk(self, items: Iterable[dict[str, Any]]) -> int:
        """Embed and upsert many items with one save at the end.

        Items without id, type or text are skipped. Embeddings run on a
        bounded worker pool; if any of them fails nothing is indexed.

        Returns:
            Number of records indexed

        Raises:
            EmbeddingError: If any embedding call fails
            PersistenceError: If the index cannot be saved
        """
        valid: list[dict[str, Any]] = []
        skipped = 0
        for item in items:
            if (
                not isinstance(item, dict)
                or not item.get("id")
                or not item.get("type")
                or not str(item.get("text") or "").strip()
            ):
                skipped += 1
                continue
            valid.append(item)

        if skipped:
            logger.warning(f"Skipped {skipped} bulk items missing id, type or text")
        if not valid:
            return 0

        with ThreadPoolExecutor(max_workers=self.config.embed_workers) as pool:
            vectors = list(
                pool.map(lambda it: self._embedding_func.embed(str(it["text"])), valid)
            )

        records = [
            VectorRecord(
                id=str(item["id"]),
                type=str(item["type"]),
                vector=vector,
                meta=item.get("meta") or {},
                key=str(item.get("key") or ""),
            )
            for item, vector in zip(valid, vectors)
        ]
        count = self._vector_store.bulk_index(records)
        self._vector_store.save()
        logger.info(f"Indexed {count} records in bulk")
        return count

    def clear(self) -> None:
        """Remove every indexed record, including the persisted file."""
        self._vector_store.clear()

    def stats(self) -> dict[str, Any]:
        """Get index statistics."""
        stats = getattr(self._vector_store, "stats", None)
        if callable(stats):
            return stats()
        return {"total_records": len(self._vector_store)}

    def close(self) -> None:
        """Flush the index to disk."""
        self._vector_store.close()

    def __enter__(self) -> "SemanticSearchService":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
        return None
