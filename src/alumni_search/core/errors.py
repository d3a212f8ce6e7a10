"""Exception types raised by the indexing and retrieval engine."""

from typing import Any


class SemanticSearchError(Exception):
    """Base class for all engine errors."""


class EmbeddingError(SemanticSearchError):
    """The embedding provider failed or returned an unusable response.

    Attributes:
        status: Upstream HTTP status, when the provider answered at all
        body: Upstream response body, when available
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        message = super().__str__()
        if self.status is not None:
            return f"{message} (status {self.status})"
        return message


class ConfigurationError(EmbeddingError):
    """A required credential or setting is missing."""


class PersistenceError(SemanticSearchError):
    """Reading or writing a persisted index file failed."""


class ValidationError(SemanticSearchError):
    """Input rejected before any work was done."""
