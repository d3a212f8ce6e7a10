"""Utility functions for scoring and query construction.

This module contains reusable functions for similarity scoring and for
turning entity fields into embeddable text. None of them depend on index
state.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import numpy as np

from alumni_search.core.errors import ValidationError

TEXT_SEPARATOR = " • "


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Compute cosine similarity between two vectors of equal length.

    Formula:
        sim = sum(a_i * b_i) / (|a| * |b|)

    A zero-norm vector has similarity 0.0 with everything. The result is
    clamped to [-1, 1] to absorb float rounding.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Cosine similarity in [-1, 1]

    Raises:
        ValidationError: If the vectors differ in length

    Example:
        >>> cosine_similarity([1.0, 0.0], [1.0, 0.0])
        1.0
        >>> cosine_similarity([0.0, 0.0], [1.0, 2.0])
        0.0
    """
    if len(a) != len(b):
        raise ValidationError(
            f"vector length mismatch: {len(a)} != {len(b)}"
        )
    v1 = np.asarray(a, dtype=np.float64)
    v2 = np.asarray(b, dtype=np.float64)

    norm_v1 = np.linalg.norm(v1)
    norm_v2 = np.linalg.norm(v2)
    if norm_v1 == 0 or norm_v2 == 0:
        return 0.0

    score = float(np.dot(v1, v2) / (norm_v1 * norm_v2))
    return max(-1.0, min(1.0, score))


def join_text_fields(parts: Iterable[Any], separator: str = TEXT_SEPARATOR) -> str:
    """Join non-empty fields into one embeddable string.

    None and blank strings are skipped instead of rendering empty tokens.

    Example:
        >>> join_text_fields(["Ada", "", None, "London"])
        'Ada • London'
    """
    cleaned = []
    for part in parts:
        if part is None:
            continue
        text = str(part).strip()
        if text:
            cleaned.append(text)
    return separator.join(cleaned)


def join_list(values: Iterable[Any] | None, separator: str = ", ") -> str:
    """Join a list field (skills, tags) into a single string."""
    if not values:
        return ""
    if isinstance(values, str):
        return values.strip()
    return separator.join(str(v).strip() for v in values if str(v).strip())


def to_match_score(similarity: float) -> int:
    """Scale a similarity to a 0-100 match score.

    Example:
        >>> to_match_score(0.876)
        88
    """
    return int(round(max(0.0, min(1.0, similarity)) * 100))
