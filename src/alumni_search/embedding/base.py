"""Base embedding function interface."""

from abc import ABC, abstractmethod

from alumni_search.core.errors import ValidationError


class EmbeddingFunction(ABC):
    """Abstract base class for embedding functions."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Return the name of the model producing the vectors."""
        ...

    @abstractmethod
    def embed(self, text: str, model: str | None = None) -> list[float]:
        """Embed a single text string."""
        ...

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed multiple texts. Default implementation calls embed() for each."""
        return [self.embed(text) for text in texts]

    @staticmethod
    def _require_text(text: str) -> str:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("text to embed must be a non-empty string")
        return text
