"""Embedding function implementations."""

from alumni_search.embedding.base import EmbeddingFunction
from alumni_search.embedding.factory import create_embedding_function
from alumni_search.embedding.openai_provider import OpenAIEmbedding

__all__ = ["EmbeddingFunction", "OpenAIEmbedding", "create_embedding_function"]
