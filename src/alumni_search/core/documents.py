"""Embeddable text and display fields for CRUD-layer documents."""

from typing import Any

from alumni_search.core.models import RecordMeta
from alumni_search.core.utils import join_list, join_text_fields


def document_id(doc: dict[str, Any]) -> str:
    """Id of a CRUD document, "" when it has none."""
    return str(doc.get("id") or doc.get("_id") or "")


def user_text(doc: dict[str, Any]) -> str:
    return join_text_fields(
        [
            doc.get("name"),
            doc.get("title"),
            join_list(doc.get("skills")),
            doc.get("bio"),
            doc.get("company"),
        ]
    )


def job_text(doc: dict[str, Any]) -> str:
    return join_text_fields(
        [
            doc.get("title"),
            doc.get("description"),
            join_list(doc.get("skills")),
            doc.get("company"),
        ]
    )


def news_text(doc: dict[str, Any]) -> str:
    return join_text_fields(
        [
            doc.get("title"),
            doc.get("summary"),
            doc.get("body"),
            join_list(doc.get("tags")),
        ]
    )


TEXT_BUILDERS = {
    "user": user_text,
    "job": job_text,
    "news": news_text,
}


def document_meta(record_type: str, doc: dict[str, Any]) -> RecordMeta:
    """Display fields kept in the index for each entity type."""
    if record_type == "user":
        return RecordMeta(name=doc.get("name"))
    if record_type == "job":
        return RecordMeta(title=doc.get("title"), company=doc.get("company"))
    return RecordMeta(title=doc.get("title"))


def to_index_item(record_type: str, doc: Any) -> dict[str, Any] | None:
    """Convert a CRUD document into an index_bulk item, or None if unusable."""
    if not isinstance(doc, dict):
        return None
    builder = TEXT_BUILDERS.get(record_type)
    record_id = document_id(doc)
    if builder is None or not record_id:
        return None
    text = builder(doc)
    if not text:
        return None
    return {
        "id": record_id,
        "type": record_type,
        "text": text,
        "meta": document_meta(record_type, doc).to_dict(),
    }
