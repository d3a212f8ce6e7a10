"""Alumni Search API service."""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, Field

from alumni_search.core.config import (
    AppSettings,
    EmbeddingSettings,
    SearchConfig,
    StorageSettings,
)
from alumni_search.core.errors import (
    ConfigurationError,
    EmbeddingError,
    PersistenceError,
    ValidationError,
)
from alumni_search.core.models import Profile
from alumni_search.core.recommend import RecommendationEngine
from alumni_search.core.search import SemanticSearchService
from alumni_search.core.sources import RecordSource
from alumni_search.core.storage.config import create_job_cache, create_vector_store
from alumni_search.embedding.factory import create_embedding_function
from alumni_search.log import configure_logging


class IndexRequest(BaseModel):
    id: str = ""
    type: str = ""
    text: str = ""
    meta: Dict[str, Any] = Field(default_factory=dict)


class ProfileRequest(BaseModel):
    name: Optional[str] = None
    title: Optional[str] = None
    company: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    bio: Optional[str] = None
    location: Optional[str] = None
    department: Optional[str] = None


class ResumeSuggestRequest(BaseModel):
    text: Optional[str] = None
    skills: Optional[List[str]] = None
    parsed: Optional[Dict[str, Any]] = None

    def resume_text(self) -> Optional[str]:
        if self.text:
            return self.text
        if self.parsed and self.parsed.get("text"):
            return str(self.parsed["text"])
        return None

    def resume_skills(self) -> Optional[List[str]]:
        if self.skills:
            return self.skills
        if self.parsed and self.parsed.get("skills"):
            return [str(s) for s in self.parsed["skills"]]
        return None


def build_components(
    records: RecordSource | None = None,
    config: SearchConfig | None = None,
) -> tuple[SemanticSearchService, RecommendationEngine]:
    """Construct the search service and recommendation engine from settings."""
    storage = StorageSettings()
    embedding_func = create_embedding_function(EmbeddingSettings())
    service = SemanticSearchService(
        embedding_func=embedding_func,
        vector_store=create_vector_store(storage),
        records=records,
        config=config,
    )
    engine = RecommendationEngine(service, create_job_cache(storage))
    return service, engine


def create_app(
    service: SemanticSearchService | None = None,
    engine: RecommendationEngine | None = None,
    records: RecordSource | None = None,
) -> FastAPI:
    """Create the API application.

    Components passed in are used as-is; otherwise they are built from the
    environment when the application starts. The vector index is flushed to
    disk on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        search_service, recommender = service, engine
        if search_service is None:
            search_service, built_engine = build_components(records=records)
            recommender = recommender or built_engine
        elif recommender is None:
            recommender = RecommendationEngine(
                search_service, create_job_cache(StorageSettings())
            )
        app.state.search_service = search_service
        app.state.recommendation_engine = recommender
        try:
            yield
        finally:
            try:
                search_service.close()
            except PersistenceError as e:
                logger.error(f"Failed to flush vector store on shutdown: {e}")

    app = FastAPI(
        title="Alumni Search API",
        description="Semantic search and job recommendations for the alumni network",
        version="0.1.0",
        lifespan=lifespan,
    )
    _register_error_handlers(app)
    _register_routes(app)
    return app


def get_search_service(request: Request) -> SemanticSearchService:
    return request.app.state.search_service


def get_recommendation_engine(request: Request) -> RecommendationEngine:
    return request.app.state.recommendation_engine


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"message": str(exc)})

    @app.exception_handler(ConfigurationError)
    async def handle_configuration(request: Request, exc: ConfigurationError):
        logger.error(f"{request.method} {request.url.path} misconfigured: {exc}")
        return JSONResponse(status_code=503, content={"message": str(exc)})

    @app.exception_handler(EmbeddingError)
    async def handle_embedding(request: Request, exc: EmbeddingError):
        logger.error(f"{request.method} {request.url.path} embedding failed: {exc}")
        return JSONResponse(
            status_code=502,
            content={"message": str(exc), "upstream_status": exc.status},
        )

    @app.exception_handler(PersistenceError)
    async def handle_persistence(request: Request, exc: PersistenceError):
        logger.error(f"{request.method} {request.url.path} persistence failed: {exc}")
        return JSONResponse(status_code=500, content={"message": str(exc)})


def _register_routes(app: FastAPI) -> None:
    @app.post("/api/ai/index", status_code=201)
    def index_item(
        request: IndexRequest,
        service: SemanticSearchService = Depends(get_search_service),
    ) -> Dict[str, Any]:
        """Embed and index one entity."""
        record = service.index(request.id, request.type, request.text, request.meta)
        return {"ok": True, "message": "Indexed", "id": record.id, "type": record.type}

    @app.post("/api/ai/index-bulk")
    def index_bulk(
        items: List[Dict[str, Any]],
        service: SemanticSearchService = Depends(get_search_service),
    ) -> Dict[str, Any]:
        """Embed and index many entities with a single save."""
        if not items:
            raise ValidationError("Array body required")
        return {"ok": True, "indexed": service.index_bulk(items)}

    @app.delete("/api/ai/index")
    def clear_index(
        service: SemanticSearchService = Depends(get_search_service),
    ) -> Dict[str, Any]:
        """Remove every indexed entity."""
        service.clear()
        return {"ok": True, "message": "Index cleared"}

    @app.get("/api/ai/stats")
    def index_stats(
        service: SemanticSearchService = Depends(get_search_service),
    ) -> Dict[str, Any]:
        return service.stats()

    @app.get("/api/search/semantic")
    def semantic_search(
        q: str = "",
        type: Optional[str] = None,
        limit: int = Query(default=10, ge=0),
        service: SemanticSearchService = Depends(get_search_service),
    ) -> Dict[str, Any]:
        """Rank indexed entities by similarity to the query text."""
        results = service.search(q.strip(), top_k=limit, filter_type=type)
        return {"results": [r.to_dict() for r in results]}

    @app.post("/api/recommendations/jobs")
    def recommend_jobs(
        profile: ProfileRequest,
        engine: RecommendationEngine = Depends(get_recommendation_engine),
    ) -> Dict[str, Any]:
        """Recommend indexed jobs for the supplied profile."""
        jobs = engine.recommend_jobs(Profile(**profile.model_dump()))
        return {"jobs": [j.to_dict() for j in jobs]}

    @app.get("/api/recommendations/jobs")
    def recommend_jobs_by_query(
        name: Optional[str] = None,
        title: Optional[str] = None,
        company: Optional[str] = None,
        skills: List[str] = Query(default=[]),
        bio: Optional[str] = None,
        location: Optional[str] = None,
        department: Optional[str] = None,
        engine: RecommendationEngine = Depends(get_recommendation_engine),
    ) -> Dict[str, Any]:
        """Recommend indexed jobs for a profile given as query parameters."""
        profile = Profile(
            name=name,
            title=title,
            company=company,
            skills=skills,
            bio=bio,
            location=location,
            department=department,
        )
        jobs = engine.recommend_jobs(profile)
        return {"jobs": [j.to_dict() for j in jobs]}

    @app.post("/api/resume/suggest")
    def suggest_jobs(
        request: ResumeSuggestRequest,
        engine: RecommendationEngine = Depends(get_recommendation_engine),
    ) -> Dict[str, Any]:
        """Rank cached jobs against resume text or extracted skills."""
        suggestions = engine.suggest_jobs_for_resume(
            text=request.resume_text(), skills=request.resume_skills()
        )
        return {"jobs": [s.to_dict() for s in suggestions]}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": "alumni-search-api"}


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = AppSettings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "alumni_search.api:app",
        host=settings.host,
        port=settings.port,
    )
