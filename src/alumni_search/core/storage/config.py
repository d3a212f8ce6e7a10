"""Factory functions for creating the vector index and job cache from settings."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from alumni_search.core.config import StorageSettings
    from alumni_search.core.storage.jobs import JobEmbeddingCache
    from alumni_search.core.storage.memory import JsonVectorStore


def create_vector_store(settings: "StorageSettings") -> "JsonVectorStore":
    """Create the vector index from settings, loading any persisted records.

    Args:
        settings: Storage configuration

    Returns:
        JsonVectorStore persisted at settings.vector_store_path
    """
    from alumni_search.core.storage.memory import JsonVectorStore

    return JsonVectorStore(
        persist_path=settings.vector_store_path,
        strict_dimension=settings.strict_dimension,
    )


def create_job_cache(settings: "StorageSettings") -> "JobEmbeddingCache":
    """Create the job embedding cache from settings.

    Args:
        settings: Storage configuration

    Returns:
        JobEmbeddingCache persisted at settings.job_index_path
    """
    from alumni_search.core.storage.jobs import JobEmbeddingCache

    return JobEmbeddingCache(persist_path=settings.job_index_path)
