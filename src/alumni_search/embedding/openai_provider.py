"""Remote embedding implementation using the OpenAI embeddings API."""

from typing import Any

import openai
from loguru import logger
from openai import OpenAI

from alumni_search.core.config import EmbeddingSettings, get_embedding_settings
from alumni_search.core.errors import ConfigurationError, EmbeddingError
from alumni_search.embedding.base import EmbeddingFunction


class OpenAIEmbedding(EmbeddingFunction):
    """
    Embeddings fetched from an OpenAI-compatible /embeddings endpoint.

    One outbound request per embed() call and no caching. A missing API key
    does not fail construction; every embed() raises ConfigurationError
    until a key is provided.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "text-embedding-3-small",
        base_url: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 0,
        client: Any = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._timeout = timeout
        self._max_retries = max_retries
        self._client: Any = client
        if client is None and not api_key:
            logger.warning(
                "OPENAI_API_KEY not set; embedding calls will fail until it is provided"
            )

    @classmethod
    def from_settings(
        cls, settings: EmbeddingSettings | None = None
    ) -> "OpenAIEmbedding":
        """Create from environment configuration."""
        if settings is None:
            settings = get_embedding_settings()
        return cls(
            api_key=settings.openai_api_key,
            model=settings.embedding_model,
            base_url=settings.embedding_base_url,
            timeout=settings.embedding_timeout,
            max_retries=settings.embedding_max_retries,
        )

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self) -> OpenAI:
        if self._client is not None:
            return self._client
        if not self._api_key:
            raise ConfigurationError("OPENAI_API_KEY not configured on server")
        self._client = OpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout,
            max_retries=self._max_retries,
        )
        return self._client

    def embed(self, text: str, model: str | None = None) -> list[float]:
        self._require_text(text)
        model_name = model or self._model
        client = self._get_client()

        try:
            response = client.embeddings.create(input=text, model=model_name)
        except openai.APITimeoutError as e:
            raise EmbeddingError(f"Embedding request timed out: {e}") from e
        except openai.APIStatusError as e:
            raise EmbeddingError(
                f"Embedding API error: {e.message}",
                status=e.status_code,
                body=e.body if e.body is not None else e.response.text,
            ) from e
        except openai.APIConnectionError as e:
            raise EmbeddingError(f"Could not reach embedding service: {e}") from e
        except openai.APIError as e:
            raise EmbeddingError(f"Embedding API error: {e}", body=e.body) from e

        return self._extract_embedding(response)

    @staticmethod
    def _extract_embedding(response: Any) -> list[float]:
        data = getattr(response, "data", None)
        if not data:
            raise EmbeddingError("No embedding returned")
        embedding = getattr(data[0], "embedding", None)
        if not embedding:
            raise EmbeddingError("No embedding returned")
        try:
            return [float(x) for x in embedding]
        except (TypeError, ValueError) as e:
            raise EmbeddingError(f"Malformed embedding in response: {e}") from e
