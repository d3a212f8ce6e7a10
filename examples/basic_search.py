"""
Example: Index a few alumni records and query them.

Uses the local sentence-transformers backend so no API key is needed:
    pip install -e ".[local]"
"""

from alumni_search import JsonVectorStore, SemanticSearchService
from alumni_search.core.models import JobIndexEntry
from alumni_search.core.recommend import RecommendationEngine
from alumni_search.core.storage import JobEmbeddingCache
from alumni_search.embedding.local import LocalEmbedding


def main():
    service = SemanticSearchService(
        embedding_func=LocalEmbedding(),
        vector_store=JsonVectorStore("data/example-store.json"),
    )

    print("=== Indexing records ===")
    service.index_bulk(
        [
            {
                "id": "u1",
                "type": "user",
                "text": "Ada • Data Engineer • python, spark • Berlin",
                "meta": {"name": "Ada"},
            },
            {
                "id": "j1",
                "type": "job",
                "text": "Backend Developer • Build APIs in python and postgres",
                "meta": {"title": "Backend Developer", "company": "Acme"},
            },
            {
                "id": "j2",
                "type": "job",
                "text": "Account Manager • Grow enterprise sales",
                "meta": {"title": "Account Manager", "company": "Globex"},
            },
            {
                "id": "n1",
                "type": "news",
                "text": "Alumni reunion announced for the class of 2015",
                "meta": {"title": "Reunion 2015"},
            },
        ]
    )

    print("=== Searching ===")
    for result in service.search("python engineering roles", top_k=3):
        label = result.meta.name or result.meta.title
        print(f"{result.score:.3f}  {result.type:<5} {label}")

    print("\n=== Recommendations for a profile ===")
    jobs = JobEmbeddingCache("data/example-jobs.json")
    jobs.add(JobIndexEntry(id="j1", title="Backend Developer", description="Build APIs in python"))
    jobs.add(JobIndexEntry(id="j2", title="Account Manager", description="Grow enterprise sales"))
    engine = RecommendationEngine(service, jobs)

    for job in engine.recommend_jobs({"name": "Ada", "skills": ["python", "spark"]}):
        print(f"{job.score:.3f}  {job.meta.title}")

    print("\n=== Resume suggestions ===")
    resume = "Five years building data pipelines and REST services in python"
    for suggestion in engine.suggest_jobs_for_resume(resume):
        print(f"{suggestion.match_score:>3}  {suggestion.title}")

    print("\n=== Index Statistics ===")
    for key, value in service.stats().items():
        print(f"{key}: {value}")


if __name__ == "__main__":
    main()
