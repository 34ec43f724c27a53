"""REST endpoints for league data queries."""

import logging
from typing import Annotated, Any, Callable, Optional

import duckdb
from fastapi import APIRouter, HTTPException, Query, Request

from ishtar_tierlist.services.league_service import LeagueService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["leagues"])

LeagueId = Annotated[str, Query(alias="leagueId", min_length=1)]


def _league_service(request: Request) -> LeagueService:
    service = getattr(request.app.state, "league_service", None)
    if service is None:
        raise HTTPException(503, "League database unavailable")
    return service


def _run(query: Callable[[], Any]) -> Any:
    try:
        return query()
    except duckdb.Error as e:
        logger.error(f"Database error: {e}")
        raise HTTPException(500, "Internal server error") from e


@router.get("/leagues")
def list_leagues(request: Request):
    """All leagues, ordered by name."""
    service = _league_service(request)
    return _run(service.list_leagues)


@router.get("/teams")
def list_teams(request: Request, league_id: LeagueId):
    """Teams of a league with their active player count."""
    service = _league_service(request)
    return _run(lambda: service.get_teams(league_id))


@router.get("/players")
def list_players(
    request: Request,
    league_id: LeagueId,
    player_id: Annotated[Optional[str], Query(alias="playerId")] = None,
):
    """Active players of a league, or one player's summary stats when playerId is given."""
    service = _league_service(request)
    if player_id:
        return _run(lambda: service.get_player_summary(league_id, player_id))
    return _run(lambda: service.get_players(league_id))


@router.get("/matches")
def list_matches(
    request: Request,
    league_id: LeagueId,
    limit: Annotated[Optional[int], Query(ge=1, le=500)] = None,
):
    """Matches of a league, newest first."""
    service = _league_service(request)
    return _run(lambda: service.get_matches(league_id, limit))


@router.get("/stats")
def league_stats(request: Request, league_id: LeagueId):
    """League summary counts."""
    service = _league_service(request)
    return _run(lambda: service.get_league_stats(league_id))
