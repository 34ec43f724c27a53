"""Roster sources for the tier list.

A roster is the read-only list of teams (with their players' names) and
player records that the tier list drags players from. It can come from
static JSON files, the league database, or a remote instance of the league
query API.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol

import duckdb
import httpx

from ishtar_tierlist.models.ranking import PlayerRef
from ishtar_tierlist.models.team import RosterPlayer, Team
from ishtar_tierlist.services.league_service import LeagueService
from ishtar_tierlist.utils.role_normalizer import normalize_role

logger = logging.getLogger(__name__)

UNKNOWN_TEAM_NAME = "Unknown Team"
UNKNOWN_TEAM_COLOR = "#6b7280"


class RosterUnavailableError(Exception):
    """The roster could not be fetched or parsed."""


@dataclass
class Roster:
    """Teams and players for one ranking session."""

    teams: list[Team] = field(default_factory=list)
    players: list[RosterPlayer] = field(default_factory=list)

    def team_of(self, player_name: str) -> Optional[Team]:
        # First listed team wins if a player appears on several
        return next((team for team in self.teams if player_name in team.players), None)

    def resolve(self, player_name: str) -> PlayerRef:
        """Attach team name and colour to a ranked player's name."""
        team = self.team_of(player_name)
        if team is None:
            return PlayerRef(name=player_name, team_name=UNKNOWN_TEAM_NAME, team_color=UNKNOWN_TEAM_COLOR)
        return PlayerRef(name=player_name, team_name=team.name, team_color=team.color)

    def get_player(self, player_name: str) -> Optional[RosterPlayer]:
        return next((p for p in self.players if p.name == player_name), None)


def build_roster(team_rows: list[dict], player_rows: list[dict]) -> Roster:
    """Build a roster from league query rows (``/api/teams`` + ``/api/players``).

    Teams are keyed by slug; a team's players are the league players whose
    ``team_id`` matches.
    """
    teams = [
        Team(
            id=row["slug"],
            name=row["name"],
            color=row.get("color") or UNKNOWN_TEAM_COLOR,
            players=[p["name"] for p in player_rows if p.get("team_id") == row["id"]],
        )
        for row in team_rows
    ]
    players = [
        RosterPlayer(
            name=row["name"],
            id=row.get("slug") or row["name"],
            tracker=row.get("tracker_url") or "",
            role=normalize_role(row.get("role")),
        )
        for row in player_rows
    ]
    return Roster(teams=teams, players=players)


def _build_or_raise(team_rows: list[dict], player_rows: list[dict]) -> Roster:
    """build_roster, with malformed rows reported as RosterUnavailableError."""
    try:
        return build_roster(team_rows, player_rows)
    except (KeyError, TypeError, AttributeError) as e:
        logger.error(f"Malformed roster rows: {e!r}")
        raise RosterUnavailableError(f"Malformed roster rows: {e!r}") from e


class RosterProvider(Protocol):
    async def fetch(self) -> Roster: ...


class StaticRosterProvider:
    """Roster from ``teams.json`` and ``players.json`` in a directory."""

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)

    async def fetch(self) -> Roster:
        try:
            with open(self.data_dir / "teams.json") as f:
                team_data = json.load(f)
            players_path = self.data_dir / "players.json"
            player_data = []
            if players_path.exists():
                with open(players_path) as f:
                    player_data = json.load(f)

            teams = [
                Team(id=t["id"], name=t["name"], color=t["color"], players=list(t["players"]))
                for t in team_data
            ]
            players = [
                RosterPlayer(
                    name=p["name"],
                    id=p.get("id") or p["name"],
                    tracker=p.get("tracker") or "",
                    role=normalize_role(p.get("role")),
                )
                for p in player_data
            ]
        except (OSError, json.JSONDecodeError, KeyError, TypeError) as e:
            logger.error(f"Failed to load static roster from {self.data_dir}: {e}")
            raise RosterUnavailableError(f"Roster files unreadable: {e}") from e

        logger.info(f"Loaded static roster: {len(teams)} teams, {len(players)} players")
        return Roster(teams=teams, players=players)


class DatabaseRosterProvider:
    """Roster from the league database, for the configured league."""

    def __init__(self, league_service: LeagueService, league_slug: str):
        self.league_service = league_service
        self.league_slug = league_slug

    def _query_rows(self) -> tuple[list[dict], list[dict]]:
        league = self.league_service.get_league_by_slug(self.league_slug)
        if league is None:
            raise RosterUnavailableError(f"League not found: {self.league_slug}")
        league_id = league["id"]
        return self.league_service.get_teams(league_id), self.league_service.get_players(league_id)

    async def fetch(self) -> Roster:
        try:
            # DuckDB calls block, keep them off the event loop
            team_rows, player_rows = await asyncio.to_thread(self._query_rows)
        except duckdb.Error as e:
            logger.error(f"Roster query failed: {e}")
            raise RosterUnavailableError(f"Database error: {e}") from e
        return _build_or_raise(team_rows, player_rows)


class HttpRosterProvider:
    """Roster from a remote league query API."""

    def __init__(
        self,
        base_url: str,
        league_slug: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the provider.

        Args:
            base_url: Root URL of the API serving /api/leagues, /api/teams, /api/players
            league_slug: Which league's roster to fetch
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.base_url = base_url
        self.league_slug = league_slug
        self.timeout = timeout
        self._transport = transport

    async def fetch(self) -> Roster:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                leagues = await self._get(client, "/api/leagues")
                league = next((l for l in leagues if l.get("slug") == self.league_slug), None)
                if league is None:
                    raise RosterUnavailableError(f"League not found: {self.league_slug}")
                params = {"leagueId": league["id"]}
                team_rows = await self._get(client, "/api/teams", params)
                player_rows = await self._get(client, "/api/players", params)
        except httpx.HTTPError as e:
            logger.error(f"Roster fetch failed: {e}")
            raise RosterUnavailableError(f"API call failed: {e}") from e
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            # Non-JSON body or JSON of the wrong shape
            logger.error(f"Roster API returned unexpected data: {e!r}")
            raise RosterUnavailableError(f"Unexpected API response: {e!r}") from e

        return _build_or_raise(team_rows, player_rows)

    @staticmethod
    async def _get(client: httpx.AsyncClient, path: str, params: Optional[dict] = None):
        response = await client.get(path, params=params)
        response.raise_for_status()
        return response.json()


def get_roster_provider(
    source: str,
    *,
    data_dir: Path | str = "data/roster",
    league_service: Optional[LeagueService] = None,
    api_url: str = "",
    league_slug: str = "babylon-league",
) -> RosterProvider:
    """Factory picking the provider for the configured roster source."""
    if source == "database":
        if league_service is None:
            raise ValueError("database roster source needs a league database")
        logger.info("Using DatabaseRosterProvider")
        return DatabaseRosterProvider(league_service, league_slug)
    if source == "http":
        if not api_url:
            raise ValueError("http roster source needs ROSTER_API_URL")
        logger.info(f"Using HttpRosterProvider ({api_url})")
        return HttpRosterProvider(api_url, league_slug)
    logger.info(f"Using StaticRosterProvider ({data_dir})")
    return StaticRosterProvider(data_dir)
