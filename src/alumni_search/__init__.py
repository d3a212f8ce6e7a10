"""
Alumni Search

Semantic indexing and retrieval engine for an alumni network.

Features:
- Remote text embeddings through an OpenAI-compatible API
- Exact cosine-similarity vector index persisted as a JSON file
- Semantic search with best-effort enrichment from the CRUD layer
- Job recommendations from user profiles and resumes
"""

from alumni_search.core.config import SearchConfig
from alumni_search.core.models import RecordMeta, SearchResult, VectorRecord
from alumni_search.core.recommend import RecommendationEngine
from alumni_search.core.search import SemanticSearchService
from alumni_search.core.storage import JobEmbeddingCache, JsonVectorStore

__version__ = "0.1.0"
__all__ = [
    "SearchConfig",
    "RecordMeta",
    "SearchResult",
    "VectorRecord",
    "RecommendationEngine",
    "SemanticSearchService",
    "JobEmbeddingCache",
    "JsonVectorStore",
]
