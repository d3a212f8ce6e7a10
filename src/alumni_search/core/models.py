"""Data models for index records, search hits and job suggestions."""

from dataclasses import dataclass, field, fields
from typing import Any, Mapping


def record_key(record_type: str, record_id: str) -> str:
    """Canonical index key for an entity."""
    return f"{record_type}:{record_id}"


@dataclass
class RecordMeta:
    """Display fields carried alongside a vector.

    The authoritative record lives in the CRUD layer; these fields only let a
    client render a hit without fetching it.
    """

    name: str | None = None
    title: str | None = None
    company: str | None = None
    location: str | None = None
    summary: str | None = None
    url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize the fields that are set."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "RecordMeta":
        """Deserialize meta, dropping keys outside the known field set.

        Raises:
            TypeError: If data is neither None nor a mapping
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError(f"meta must be an object, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        return cls(
            **{
                k: str(v)
                for k, v in data.items()
                if k in known and v is not None
            }
        )


@dataclass
class VectorRecord:
    """The stored unit of the vector index.

    Attributes:
        id: Opaque identifier of the source entity
        type: Entity tag ("user", "job", "news", ...)
        vector: Embedding of the entity's text
        meta: Display fields
        key: Unique index key, "{type}:{id}" unless given explicitly
    """

    id: str
    type: str
    vector: list[float]
    meta: RecordMeta = field(default_factory=RecordMeta)
    key: str = ""

    def __post_init__(self) -> None:
        self.id = str(self.id)
        self.type = str(self.type)
        if not self.key:
            self.key = record_key(self.type, self.id)
        if isinstance(self.meta, dict):
            self.meta = RecordMeta.from_dict(self.meta)

    @property
    def dimension(self) -> int:
        return len(self.vector)

    def to_dict(self) -> dict[str, Any]:
        """Serialize record to dict for JSON storage."""
        return {
            "key": self.key,
            "id": self.id,
            "type": self.type,
            "vector": list(self.vector),
            "meta": self.meta.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VectorRecord":
        """Deserialize record from dict.

        Raises:
            KeyError: If id, type or vector is missing
            TypeError: If data is not a mapping, vector is not a list or meta
                is not an object
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"record must be an object, got {type(data).__name__}")
        vector = data["vector"]
        if not isinstance(vector, list):
            raise TypeError("vector must be a list")
        return cls(
            id=data["id"],
            type=data["type"],
            vector=[float(x) for x in vector],
            meta=RecordMeta.from_dict(data.get("meta")),
            key=str(data.get("key") or ""),
        )


@dataclass
class SearchHit:
    """A raw ranked hit from the vector index."""

    key: str
    id: str
    type: str
    meta: RecordMeta
    score: float


@dataclass
class SearchResult:
    """A ranked hit enriched with the live source record (None if unavailable)."""

    id: str
    type: str
    score: float
    meta: RecordMeta
    doc: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "score": self.score,
            "meta": self.meta.to_dict(),
            "doc": self.doc,
        }


@dataclass
class JobRecommendation:
    """A job ranked against a user profile."""

    id: str
    score: float
    meta: RecordMeta
    doc: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "score": self.score,
            "doc": self.doc,
            "meta": self.meta.to_dict(),
        }


_JOB_FIELDS = {"id", "title", "company", "description", "url", "embedding"}


@dataclass
class JobIndexEntry:
    """A job posting in the secondary embedding cache.

    `id` is the id written by the ingestion step and may be empty; fields
    this cache does not use are kept in `extra` and written back unchanged.
    `embedding` stays None until the cache fill pass computes it.
    """

    id: str
    title: str
    company: str = ""
    description: str = ""
    url: str = ""
    embedding: list[float] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def display_id(self) -> str:
        """Id reported to clients: id, else _id, else the title."""
        return self.id or str(self.extra.get("_id") or "") or self.title

    @property
    def needs_embedding(self) -> bool:
        return not self.embedding

    @property
    def embedding_text(self) -> str:
        """Text embedded for this job: description, else title, else company."""
        return self.description or self.title or self.company

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        if self.id:
            data["id"] = self.id
        data.update(
            {
                "title": self.title,
                "company": self.company,
                "description": self.description,
                "url": self.url,
            }
        )
        if self.embedding:
            data["embedding"] = list(self.embedding)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "JobIndexEntry":
        """Deserialize entry from dict.

        Raises:
            KeyError: If the entry has no title
            TypeError: If data is not a mapping
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"job must be an object, got {type(data).__name__}")
        title = data["title"]
        embedding = data.get("embedding")
        return cls(
            id=str(data.get("id") or ""),
            title=str(title),
            company=str(data.get("company") or ""),
            description=str(data.get("description") or ""),
            url=str(data.get("url") or ""),
            embedding=[float(x) for x in embedding] if embedding else None,
            extra={k: v for k, v in data.items() if k not in _JOB_FIELDS},
        )


@dataclass
class JobSuggestion:
    """A cached job matched against a resume, scored 0-100."""

    id: str
    title: str
    company: str
    description: str
    url: str
    match_score: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "description": self.description,
            "url": self.url,
            "matchScore": self.match_score,
        }


@dataclass
class Profile:
    """User profile fields used to build a recommendation query."""

    name: str | None = None
    title: str | None = None
    company: str | None = None
    skills: list[str] = field(default_factory=list)
    bio: str | None = None
    location: str | None = None
    department: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        skills = data.get("skills") or []
        if isinstance(skills, str):
            skills = [skills]
        return cls(
            name=data.get("name"),
            title=data.get("title"),
            company=data.get("company"),
            skills=[str(s) for s in skills],
            bio=data.get("bio"),
            location=data.get("location"),
            department=data.get("department"),
        )
