"""Job recommendations from user profiles and resumes."""

from __future__ import annotations

from typing import Any

from loguru import logger

from alumni_search.core.config import SearchConfig
from alumni_search.core.errors import SemanticSearchError, ValidationError
from alumni_search.core.models import JobRecommendation, JobSuggestion, Profile
from alumni_search.core.search import SemanticSearchService
from alumni_search.core.storage.jobs import JobEmbeddingCache
from alumni_search.core.utils import (
    cosine_similarity,
    join_list,
    join_text_fields,
    to_match_score,
)


def build_profile_text(profile: Profile) -> str:
    """Build the recommendation query for a profile.

    Fields are taken in the order name, title, company, skills, bio,
    location, department; empty ones are skipped.

    Example:
        >>> build_profile_text(Profile(name="Ada", skills=["python", "sql"]))
        'Ada • python, sql'
    """
    return join_text_fields(
        [
            profile.name,
            profile.title,
            profile.company,
            join_list(profile.skills),
            profile.bio,
            profile.location,
            profile.department,
        ]
    )


class RecommendationEngine:
    """Ranks jobs for a user.

    Two paths:
    - recommend_jobs: profile text searched against indexed "job" records
    - suggest_jobs_for_resume: resume text ranked against the job embedding
      cache, which is filled first for any job still lacking an embedding

    Only the resume path drops non-positive scores; profile recommendations
    return whatever the index ranks.
    """

    def __init__(
        self,
        search_service: SemanticSearchService,
        job_cache: JobEmbeddingCache,
        config: SearchConfig | None = None,
    ) -> None:
        self.config = config or search_service.config
        self._search = search_service
        self._job_cache = job_cache

    @property
    def job_cache(self) -> JobEmbeddingCache:
        return self._job_cache

    def recommend_jobs(
        self, profile: Profile | dict[str, Any]
    ) -> list[JobRecommendation]:
        """Recommend indexed jobs for a profile.

        A profile with no usable fields yields no recommendations.

        Raises:
            EmbeddingError: If the profile text cannot be embedded
        """
        if isinstance(profile, dict):
            profile = Profile.from_dict(profile)

        query = build_profile_text(profile)
        if not query:
            return []

        results = self._search.search(
            query, top_k=self.config.recommend_top_k, filter_type="job"
        )
        return [
            JobRecommendation(id=r.id, score=r.score, meta=r.meta, doc=r.doc)
            for r in results
        ]

    def suggest_jobs_for_resume(
        self,
        text: str | None = None,
        skills: list[str] | None = None,
    ) -> list[JobSuggestion]:
        """Rank cached jobs against resume text (or extracted skills).

        Raises:
            ValidationError: If the resume text is too short
            EmbeddingError: If the resume cannot be embedded
        """
        query = (text or "").strip() or " ".join(skills or []).strip()
        if len(query) < self.config.min_resume_chars:
            raise ValidationError("No resume text provided for suggestions")

        resume_vector = self._search.embedding_func.embed(query)

        try:
            self._job_cache.fill(
                self._search.embedding_func, workers=self.config.embed_workers
            )
        except SemanticSearchError as e:
            logger.warning(f"Failed to compute job embeddings: {e}")

        scored = []
        for job in self._job_cache.entries():
            if job.embedding and len(job.embedding) == len(resume_vector):
                score = cosine_similarity(resume_vector, job.embedding)
            else:
                score = 0.0
            scored.append((job, score))

        scored.sort(key=lambda s: s[1], reverse=True)
        return [
            JobSuggestion(
                id=job.display_id,
                title=job.title,
                company=job.company,
                description=job.description,
                url=job.url,
                match_score=to_match_score(score),
            )
            for job, score in scored[: self.config.suggest_top_n]
            if score > 0
        ]
