"""Core components for semantic indexing and retrieval."""

from alumni_search.core.config import (
    AppSettings,
    EmbeddingSettings,
    SearchConfig,
    StorageSettings,
)
from alumni_search.core.errors import (
    ConfigurationError,
    EmbeddingError,
    PersistenceError,
    SemanticSearchError,
    ValidationError,
)
from alumni_search.core.models import (
    JobIndexEntry,
    JobRecommendation,
    JobSuggestion,
    Profile,
    RecordMeta,
    SearchHit,
    SearchResult,
    VectorRecord,
)
from alumni_search.core.recommend import RecommendationEngine
from alumni_search.core.search import SemanticSearchService

__all__ = [
    "AppSettings",
    "EmbeddingSettings",
    "SearchConfig",
    "StorageSettings",
    "ConfigurationError",
    "EmbeddingError",
    "PersistenceError",
    "SemanticSearchError",
    "ValidationError",
    "JobIndexEntry",
    "JobRecommendation",
    "JobSuggestion",
    "Profile",
    "RecordMeta",
    "SearchHit",
    "SearchResult",
    "VectorRecord",
    "RecommendationEngine",
    "SemanticSearchService",
]
