"""Select an embedding function from settings."""

from alumni_search.core.config import EmbeddingSettings
from alumni_search.embedding.base import EmbeddingFunction


def create_embedding_function(settings: EmbeddingSettings) -> EmbeddingFunction:
    """Create the configured embedding backend.

    The local backend is imported lazily so sentence-transformers is only
    needed when selected.
    """
    if settings.embedding_provider == "local":
        from alumni_search.embedding.local import LocalEmbedding

        return LocalEmbedding(
            model_name=settings.local_embedding_model,
            device=settings.local_embedding_device,
        )

    from alumni_search.embedding.openai_provider import OpenAIEmbedding

    return OpenAIEmbedding.from_settings(settings)
