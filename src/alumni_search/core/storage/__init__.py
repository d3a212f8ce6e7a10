"""Storage backends for the semantic index.

- VectorStore: Abstract interface for vector similarity search
- JsonVectorStore: In-memory exact index persisted as a JSON file
- JobEmbeddingCache: Persisted job postings with lazily computed embeddings
"""

from alumni_search.core.storage.jobs import JobEmbeddingCache
from alumni_search.core.storage.memory import JsonVectorStore
from alumni_search.core.storage.vector import VectorStore

__all__ = [
    "VectorStore",
    "JsonVectorStore",
    "JobEmbeddingCache",
]
