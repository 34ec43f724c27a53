"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ishtar_tierlist.config import settings
from ishtar_tierlist.api.routes.leagues import router as leagues_router
from ishtar_tierlist.api.routes.rankings import router as rankings_router
from ishtar_tierlist.repositories.league_repository import LeagueRepository
from ishtar_tierlist.services.drag_session import DragSession
from ishtar_tierlist.services.league_service import LeagueService
from ishtar_tierlist.services.query_cache import QueryCache
from ishtar_tierlist.services.ranking_storage import JsonFileKeyValueStore, RankingStorage
from ishtar_tierlist.services.ranking_store import RankingStore
from ishtar_tierlist.services.roster_provider import get_roster_provider

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Relative paths in settings resolve from the repo root
REPO_ROOT = Path(__file__).parent.parent.parent


def resolve_path(path: str) -> Path:
    """Resolve a settings path, relative ones from the repo root."""
    resolved = Path(path)
    if resolved.is_absolute():
        return resolved
    return REPO_ROOT / resolved


def build_league_service() -> LeagueService | None:
    """League service over the configured database, or None if it isn't built yet."""
    try:
        repository = LeagueRepository(resolve_path(settings.database_path))
    except FileNotFoundError as e:
        logger.warning(f"League queries disabled: {e}")
        return None
    return LeagueService(repository, QueryCache(default_ttl=settings.query_cache_ttl_seconds))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup: anything already set (e.g. by tests) is kept
    if not hasattr(app.state, "settings"):
        app.state.settings = settings
    if not hasattr(app.state, "league_service"):
        app.state.league_service = build_league_service()
    if not hasattr(app.state, "ranking_store"):
        storage = RankingStorage(JsonFileKeyValueStore(resolve_path(settings.rankings_storage_dir)))
        app.state.ranking_store = RankingStore.restore(
            storage, allow_duplicates=settings.allow_duplicate_placements
        )
    if not hasattr(app.state, "drag_session"):
        app.state.drag_session = DragSession(
            app.state.ranking_store, grace_seconds=settings.drag_grace_seconds
        )
    if not hasattr(app.state, "roster_provider"):
        try:
            app.state.roster_provider = get_roster_provider(
                settings.roster_source,
                data_dir=resolve_path(settings.roster_data_dir),
                league_service=app.state.league_service,
                api_url=settings.roster_api_url,
                league_slug=settings.league_slug,
            )
        except ValueError as e:
            logger.error(f"Roster source misconfigured: {e}")
            app.state.roster_provider = None
    yield


app = FastAPI(
    title="Ishtar Tierlist",
    description="League stats and role tier list",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "ishtar-tierlist",
        "league_database": getattr(app.state, "league_service", None) is not None,
    }


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Ishtar Tierlist API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(leagues_router)
app.include_router(rankings_router)


def run():
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("ishtar_tierlist.main:app", host=settings.host, port=settings.port, reload=settings.debug)
