"""League queries with result caching and derived stats."""

import logging
from typing import Any, Callable

from ishtar_tierlist.repositories.league_repository import LeagueRepository
from ishtar_tierlist.services.query_cache import QueryCache

logger = logging.getLogger(__name__)


def calculate_kda(kills: float | None, deaths: float | None, assists: float | None) -> float:
    """KDA ratio; an assist counts half a kill, zero deaths divides by one."""
    kills = kills or 0
    deaths = deaths or 0
    assists = assists or 0
    if deaths == 0:
        return kills + assists / 2
    return (kills + assists / 2) / deaths


class LeagueService:
    """Read-only league data, one cached repository query per operation."""

    def __init__(self, repository: LeagueRepository, cache: QueryCache | None = None):
        self.repository = repository
        self.cache = cache or QueryCache()

    def _cached(self, name: str, params: dict, fetch: Callable[[], Any]) -> Any:
        key = QueryCache.make_key(name, params)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        result = fetch()
        self.cache.set(key, result)
        return result

    def list_leagues(self) -> list[dict]:
        return self._cached("leagues", {}, self.repository.list_leagues)

    def get_league_by_slug(self, slug: str) -> dict | None:
        leagues = self.list_leagues()
        return next((league for league in leagues if league["slug"] == slug), None)

    def get_teams(self, league_id: str) -> list[dict]:
        return self._cached(
            "teams", {"league_id": league_id}, lambda: self.repository.get_teams(league_id)
        )

    def get_players(self, league_id: str) -> list[dict]:
        return self._cached(
            "players", {"league_id": league_id}, lambda: self.repository.get_players(league_id)
        )

    def get_player_summary(self, league_id: str, player_id: str) -> dict:
        """Player totals and averages plus ``kda_ratio``."""

        def fetch() -> dict:
            summary = self.repository.get_player_summary(league_id, player_id)
            if not summary:
                return {}
            summary["kda_ratio"] = calculate_kda(
                summary.get("total_kills"),
                summary.get("total_deaths"),
                summary.get("total_assists"),
            )
            return summary

        return self._cached("player_summary", {"league_id": league_id, "player_id": player_id}, fetch)

    def get_matches(self, league_id: str, limit: int | None = None) -> list[dict]:
        return self._cached(
            "matches",
            {"league_id": league_id, "limit": limit},
            lambda: self.repository.get_matches(league_id, limit),
        )

    def get_league_stats(self, league_id: str) -> dict:
        """League summary counts.

        Kill/death/assist/damage totals stay zero until per-game stats are
        aggregated at league level.
        """

        def fetch() -> dict:
            match_counts = self.repository.get_match_counts(league_id)
            return {
                "total_matches": match_counts.get("total_matches") or 0,
                "total_games": match_counts.get("total_games") or 0,
                "total_teams": self.repository.count_teams(league_id),
                "total_players": self.repository.count_active_players(league_id),
                "total_kills": 0,
                "total_deaths": 0,
                "total_assists": 0,
                "total_damage": 0,
            }

        return self._cached("stats", {"league_id": league_id}, fetch)
