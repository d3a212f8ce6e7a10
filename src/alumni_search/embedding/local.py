"""In-process embeddings with sentence-transformers."""

from typing import Any

from loguru import logger

from alumni_search.core.errors import EmbeddingError
from alumni_search.embedding.base import EmbeddingFunction


class LocalEmbedding(EmbeddingFunction):
    """
    Embeddings computed in-process, for development without a remote key.

    The model is loaded on the first embed call. Its vectors are not
    comparable with those of the remote provider, so the index and the job
    cache must be rebuilt when switching providers.
    """

    def __init__(
        self,
        model_name: str = "all-MiniLM-L6-v2",
        device: str | None = None,
        normalize: bool = True,
    ) -> None:
        self._model_name = model_name
        self._device = device
        self._normalize = normalize
        self._encoder: Any = None

    @property
    def model(self) -> str:
        return self._model_name

    def _get_encoder(self) -> Any:
        if self._encoder is None:
            from sentence_transformers import SentenceTransformer

            logger.info(f"Loading sentence-transformers model {self._model_name}")
            try:
                self._encoder = SentenceTransformer(
                    self._model_name, device=self._device
                )
            except OSError as e:
                raise EmbeddingError(
                    f"Could not load local model {self._model_name}: {e}"
                ) from e
        return self._encoder

    def embed(self, text: str, model: str | None = None) -> list[float]:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        for text in texts:
            self._require_text(text)
        vectors = self._get_encoder().encode(
            texts,
            convert_to_numpy=True,
            normalize_embeddings=self._normalize,
        )
        return [[float(x) for x in row] for row in vectors]
