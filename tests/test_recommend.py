"""Tests for RecommendationEngine."""

import json
from pathlib import Path

import pytest

from alumni_search.core.config import SearchConfig
from alumni_search.core.errors import EmbeddingError, ValidationError
from alumni_search.core.models import JobIndexEntry, Profile
from alumni_search.core.recommend import RecommendationEngine, build_profile_text
from alumni_search.core.search import SemanticSearchService
from alumni_search.core.sources import MappingRecordSource
from alumni_search.core.storage import JobEmbeddingCache

RESUME = "Experienced python engineer with machine learning background"


def write_jobs(path: Path, jobs: list[dict]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(jobs))


@pytest.fixture
def embedding(make_embedding):
    return make_embedding(
        vectors={
            RESUME: [1.0, 0.0, 0.0],
            "Build ML pipelines in python": [0.9, 0.1, 0.0],
            "Frontend React developer": [0.1, 0.9, 0.0],
            "Accountant": [-1.0, 0.0, 0.0],
            "Warehouse": [0.0, 0.0, 1.0],
            "Ada • Data Engineer • python, sql": [1.0, 0.0, 0.0],
            "ML Engineer role": [1.0, 0.0, 0.0],
            "Sales role": [0.0, 1.0, 0.0],
        },
        dimension=3,
    )


def create_engine(embedding, store, job_cache, records=None, **config):
    search = SemanticSearchService(
        embedding_func=embedding,
        vector_store=store,
        records=records,
        config=SearchConfig(**config),
    )
    return RecommendationEngine(search, job_cache)


class TestProfileText:
    """Test cases for build_profile_text."""

    def test_full_profile_order(self) -> None:
        profile = Profile(
            name="Ada",
            title="Data Engineer",
            company="Acme",
            skills=["python", "sql"],
            bio="Loves pipelines",
            location="Berlin",
            department="CS",
        )
        assert build_profile_text(profile) == (
            "Ada • Data Engineer • Acme • python, sql • Loves pipelines • Berlin • CS"
        )

    def test_empty_fields_skipped(self) -> None:
        profile = Profile(name="Ada", title="", company=None, skills=[], bio="  ")
        assert build_profile_text(profile) == "Ada"

    def test_empty_profile(self) -> None:
        assert build_profile_text(Profile()) == ""


class TestRecommendJobs:
    """Test cases for profile-based job recommendations."""

    def test_recommends_only_jobs(self, embedding, store, job_cache) -> None:
        records = MappingRecordSource({"job": {"j1": {"title": "ML Engineer"}}})
        engine = create_engine(embedding, store, job_cache, records)
        search = engine._search
        search.index("j1", "job", "ML Engineer role", {"title": "ML Engineer"})
        search.index("j2", "job", "Sales role", {"title": "Sales"})
        search.index("u9", "user", "ML Engineer role", {"name": "Twin"})

        jobs = engine.recommend_jobs(
            {"name": "Ada", "title": "Data Engineer", "skills": ["python", "sql"]}
        )

        assert [j.id for j in jobs] == ["j1", "j2"]
        assert jobs[0].score == pytest.approx(1.0)
        assert jobs[0].doc == {"title": "ML Engineer"}
        assert jobs[1].doc is None
        assert jobs[0].to_dict()["meta"] == {"title": "ML Engineer"}

    def test_top_k_fixed_by_config(self, embedding, store, job_cache) -> None:
        engine = create_engine(embedding, store, job_cache, recommend_top_k=2)
        for i in range(5):
            engine._search.index(f"j{i}", "job", "ML Engineer role")

        jobs = engine.recommend_jobs(Profile(name="Ada", title="Data Engineer", skills=["python", "sql"]))

        assert len(jobs) == 2

    def test_empty_profile_skips_embedding(self, embedding, store, job_cache) -> None:
        engine = create_engine(embedding, store, job_cache)
        assert engine.recommend_jobs(Profile()) == []
        assert embedding.calls == []


class TestSuggestJobsForResume:
    """Test cases for resume-based suggestions over the job cache."""

    def test_fills_missing_embeddings_once(
        self, embedding, store, job_index_path: Path
    ) -> None:
        """Three cached jobs, one precomputed: all end up embedded, no duplicates."""
        write_jobs(
            job_index_path,
            [
                {
                    "id": "1",
                    "title": "ML Engineer",
                    "description": "Build ML pipelines in python",
                    "embedding": [0.9, 0.1, 0.0],
                },
                {"id": "2", "title": "Frontend", "description": "Frontend React developer"},
                {"id": "3", "title": "Accountant", "company": "Ledger"},
            ],
        )
        cache = JobEmbeddingCache(job_index_path)
        engine = create_engine(embedding, store, cache)

        engine.suggest_jobs_for_resume(RESUME)

        saved = json.loads(job_index_path.read_text())
        assert len(saved) == 3
        assert sorted(j["id"] for j in saved) == ["1", "2", "3"]
        assert all(j.get("embedding") for j in saved)
        assert "Build ML pipelines in python" not in embedding.calls
        assert embedding.calls.count("Frontend React developer") == 1
        assert embedding.calls.count("Accountant") == 1

    def test_jobs_without_ids_sharing_a_title_survive(
        self, embedding, store, job_index_path: Path
    ) -> None:
        write_jobs(
            job_index_path,
            [
                {
                    "title": "Software Engineer",
                    "company": "Acme",
                    "description": "Build ML pipelines in python",
                },
                {
                    "title": "Software Engineer",
                    "company": "Globex",
                    "description": "Frontend React developer",
                },
                {"title": "Accountant"},
            ],
        )
        engine = create_engine(embedding, store, JobEmbeddingCache(job_index_path))

        suggestions = engine.suggest_jobs_for_resume(RESUME)

        saved = json.loads(job_index_path.read_text())
        assert [j["company"] for j in saved] == ["Acme", "Globex", ""]
        assert all(j.get("embedding") for j in saved)
        assert all("id" not in j for j in saved)
        assert [(s.id, s.company) for s in suggestions] == [
            ("Software Engineer", "Acme"),
            ("Software Engineer", "Globex"),
        ]

    def test_ranks_filters_and_scales(
        self, embedding, store, job_index_path: Path
    ) -> None:
        write_jobs(
            job_index_path,
            [
                {"id": "acct", "title": "Accountant"},
                {"id": "ml", "title": "ML", "description": "Build ML pipelines in python",
                 "url": "https://jobs.example/ml"},
                {"id": "fe", "title": "FE", "description": "Frontend React developer"},
                {"id": "wh", "title": "Warehouse"},
            ],
        )
        engine = create_engine(embedding, store, JobEmbeddingCache(job_index_path))

        suggestions = engine.suggest_jobs_for_resume(text=RESUME)

        assert [s.id for s in suggestions] == ["ml", "fe"]
        assert suggestions[0].match_score == 99
        assert suggestions[0].url == "https://jobs.example/ml"
        assert suggestions[1].match_score == 11
        assert all(0 < s.match_score <= 100 for s in suggestions)

    def test_top_n_limit(self, embedding, store, job_index_path: Path) -> None:
        write_jobs(
            job_index_path,
            [
                {"id": str(i), "title": "ML", "embedding": [1.0, 0.0, float(i) / 10]}
                for i in range(15)
            ],
        )
        engine = create_engine(
            embedding, store, JobEmbeddingCache(job_index_path), suggest_top_n=10
        )

        suggestions = engine.suggest_jobs_for_resume(RESUME)

        assert len(suggestions) == 10
        assert suggestions[0].id == "0"

    def test_skills_used_when_no_text(self, embedding, store, job_cache) -> None:
        engine = create_engine(embedding, store, job_cache)
        skills = ["python", "machine learning", "sql", "docker"]
        assert engine.suggest_jobs_for_resume(skills=skills) == []
        assert embedding.calls == ["python machine learning sql docker"]

    def test_short_resume_rejected(self, embedding, store, job_cache) -> None:
        engine = create_engine(embedding, store, job_cache)
        with pytest.raises(ValidationError):
            engine.suggest_jobs_for_resume("too short")
        with pytest.raises(ValidationError):
            engine.suggest_jobs_for_resume(skills=["sql"])

    def test_resume_embedding_failure_propagates(
        self, embedding, store, job_cache
    ) -> None:
        embedding.fail_on.add(RESUME)
        engine = create_engine(embedding, store, job_cache)
        with pytest.raises(EmbeddingError):
            engine.suggest_jobs_for_resume(RESUME)

    def test_fill_failure_ranks_existing(
        self, embedding, store, job_index_path: Path
    ) -> None:
        write_jobs(
            job_index_path,
            [
                {"id": "ml", "title": "ML", "embedding": [1.0, 0.0, 0.0]},
                {"id": "bad", "title": "Broken job"},
            ],
        )
        embedding.fail_on.add("Broken job")
        engine = create_engine(embedding, store, JobEmbeddingCache(job_index_path))

        suggestions = engine.suggest_jobs_for_resume(RESUME)

        assert [s.id for s in suggestions] == ["ml"]
        saved = json.loads(job_index_path.read_text())
        assert "embedding" not in [j for j in saved if j["id"] == "bad"][0]

    def test_mismatched_embedding_scores_zero(
        self, embedding, store, job_index_path: Path
    ) -> None:
        write_jobs(
            job_index_path,
            [{"id": "old", "title": "Old", "embedding": [1.0, 0.0]}],
        )
        engine = create_engine(embedding, store, JobEmbeddingCache(job_index_path))
        assert engine.suggest_jobs_for_resume(RESUME) == []


class TestJobEmbeddingCache:
    """Test cases for the job cache itself."""

    def test_corrupt_file_loads_empty(self, job_index_path: Path) -> None:
        job_index_path.parent.mkdir(parents=True)
        job_index_path.write_text("not json")
        assert len(JobEmbeddingCache(job_index_path)) == 0

    def test_entries_without_title_skipped(self, job_index_path: Path) -> None:
        write_jobs(job_index_path, [{"id": "1"}, {"id": "2", "title": "Dev"}])
        cache = JobEmbeddingCache(job_index_path)
        assert [e.id for e in cache.entries()] == ["2"]

    def test_duplicate_ids_in_file_are_kept(
        self, embedding, job_index_path: Path
    ) -> None:
        write_jobs(
            job_index_path,
            [
                {"id": "7", "title": "Warehouse"},
                {"id": "7", "title": "Accountant"},
            ],
        )
        cache = JobEmbeddingCache(job_index_path)

        assert cache.fill(embedding) == 2

        saved = json.loads(job_index_path.read_text())
        assert [(j["id"], j["title"]) for j in saved] == [
            ("7", "Warehouse"),
            ("7", "Accountant"),
        ]

    def test_unparsed_items_written_back(
        self, embedding, job_index_path: Path
    ) -> None:
        write_jobs(
            job_index_path,
            [{"id": "1", "title": "Warehouse"}, {"id": "2"}, "garbage", ["x"]],
        )
        cache = JobEmbeddingCache(job_index_path)
        assert len(cache) == 1

        cache.fill(embedding)

        saved = json.loads(job_index_path.read_text())
        assert saved[0]["embedding"] == [0.0, 0.0, 1.0]
        assert saved[1:] == [{"id": "2"}, "garbage", ["x"]]

    def test_add_upserts_by_id(self, job_cache: JobEmbeddingCache) -> None:
        job_cache.add(JobIndexEntry(id="1", title="Dev"))
        job_cache.add(JobIndexEntry(id="1", title="Senior Dev"))
        assert len(job_cache) == 1
        assert job_cache.entries()[0].title == "Senior Dev"

    def test_add_without_id_appends(self, job_cache: JobEmbeddingCache) -> None:
        job_cache.add(JobIndexEntry(id="", title="Dev", company="Acme"))
        job_cache.add(JobIndexEntry(id="", title="Dev", company="Globex"))
        assert [e.company for e in job_cache.entries()] == ["Acme", "Globex"]

    def test_fill_without_work_does_not_write(
        self, embedding, job_cache: JobEmbeddingCache, job_index_path: Path
    ) -> None:
        job_cache.add(JobIndexEntry(id="1", title="Dev", embedding=[1.0, 0.0, 0.0]))
        assert job_cache.fill(embedding) == 0
        assert not job_index_path.exists()

    def test_fill_counts_and_persists(
        self, embedding, job_cache: JobEmbeddingCache, job_index_path: Path
    ) -> None:
        job_cache.add(JobIndexEntry(id="1", title="Warehouse"))
        job_cache.add(JobIndexEntry(id="2", title="Accountant"))

        assert job_cache.fill(embedding, workers=2) == 2
        assert job_cache.needs_embedding() == []

        reloaded = JobEmbeddingCache(job_index_path)
        assert {e.id: e.embedding for e in reloaded} == {
            "1": [0.0, 0.0, 1.0],
            "2": [-1.0, 0.0, 0.0],
        }
