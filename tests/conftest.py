"""Shared test fixtures."""

import hashlib
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from alumni_search.core.errors import EmbeddingError  # noqa: E402
from alumni_search.core.storage import JobEmbeddingCache, JsonVectorStore  # noqa: E402
from alumni_search.embedding.base import EmbeddingFunction  # noqa: E402


class MockEmbedding(EmbeddingFunction):
    """Deterministic embedding for tests.

    Texts registered in `vectors` map to fixed vectors; anything else gets a
    hash-derived vector of length `dimension`. Texts in `fail_on` raise
    EmbeddingError.
    """

    def __init__(self, vectors=None, dimension: int = 16, fail_on=None) -> None:
        self.vectors = dict(vectors or {})
        self.dimension = dimension
        self.fail_on = set(fail_on or ())
        self.calls: list[str] = []

    @property
    def model(self) -> str:
        return "mock"

    def embed(self, text: str, model: str | None = None) -> list[float]:
        self._require_text(text)
        self.calls.append(text)
        if text in self.fail_on:
            raise EmbeddingError("mock provider failure", status=500, body="boom")
        if text in self.vectors:
            return list(self.vectors[text])
        h = hashlib.md5(text.encode()).hexdigest()
        values = [int(h[i : i + 2], 16) / 255.0 for i in range(0, 32, 2)]
        return (values * (self.dimension // 16 + 1))[: self.dimension]


@pytest.fixture
def embedding() -> MockEmbedding:
    return MockEmbedding()


@pytest.fixture
def make_embedding():
    return MockEmbedding


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "vector-store.json"


@pytest.fixture
def store(store_path: Path) -> JsonVectorStore:
    return JsonVectorStore(persist_path=store_path)


@pytest.fixture
def job_index_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "jobIndex.json"


@pytest.fixture
def job_cache(job_index_path: Path) -> JobEmbeddingCache:
    return JobEmbeddingCache(persist_path=job_index_path)
