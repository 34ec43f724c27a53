"""DuckDB-based data access for league data."""

import logging
from pathlib import Path

import duckdb
import pandas as pd

logger = logging.getLogger(__name__)


class LeagueRepository:
    """Data access layer - parameterized DuckDB queries against a pre-built database file."""

    def __init__(self, database_path: str | Path):
        """Initialize with path to DuckDB database.

        Args:
            database_path: Path to league_data.duckdb
                          (built from CSV files by scripts/build_duckdb.py)

        Raises:
            FileNotFoundError: If the database file doesn't exist
        """
        self._db_path = Path(database_path)

        if not self._db_path.exists():
            raise FileNotFoundError(
                f"DuckDB database not found: {self._db_path}\n"
                f"Run: python scripts/build_duckdb.py <csv_dir>"
            )

        # Verify we can connect
        with duckdb.connect(str(self._db_path), read_only=True) as conn:
            tables = conn.execute("SHOW TABLES").fetchall()
        logger.info(f"LeagueRepository: Using {self._db_path} ({len(tables)} tables)")

    def _query(self, sql: str, params: list | None = None) -> list[dict]:
        """Execute query and return list of JSON-serializable dicts."""
        # Read-only connection per query - no locks needed, thread-safe
        with duckdb.connect(str(self._db_path), read_only=True) as conn:
            cursor = conn.execute(sql, params) if params else conn.execute(sql)
            df = cursor.df()

        for col in df.columns:
            if pd.api.types.is_datetime64_any_dtype(df[col]):
                df[col] = df[col].dt.strftime("%Y-%m-%dT%H:%M:%S")

        # Native Python scalars, NULL/NaN as None
        df = df.astype(object).where(df.notna(), None)
        return df.to_dict(orient="records")

    def list_leagues(self) -> list[dict]:
        """All leagues. Returns dicts with: id, name, slug"""
        return self._query("""
            SELECT id, name, slug
            FROM leagues
            ORDER BY name
        """)

    def get_league_by_slug(self, slug: str) -> dict | None:
        results = self._query(
            """
            SELECT id, name, slug
            FROM leagues
            WHERE slug = ?
            """,
            [slug],
        )
        return results[0] if results else None

    def get_teams(self, league_id: str) -> list[dict]:
        """Teams in a league with their active player count.

        Returns dicts with: id, league_id, name, slug, color, player_count
        """
        return self._query(
            """
            SELECT
                t.id,
                t.league_id,
                t.name,
                t.slug,
                t.color,
                COUNT(lp.id) AS player_count
            FROM teams t
            LEFT JOIN league_players lp
                ON t.id = lp.team_id AND CAST(lp.is_active AS BOOLEAN)
            WHERE t.league_id = ?
            GROUP BY t.id, t.league_id, t.name, t.slug, t.color
            ORDER BY t.name
            """,
            [league_id],
        )

    def get_players(self, league_id: str) -> list[dict]:
        """Active players of a league.

        Returns dicts with: id, name, slug, tracker_url, role, is_active,
        season, team_id, team_name, team_color, team_slug.
        Ordered by team name, then player name.
        """
        return self._query(
            """
            SELECT
                p.id,
                p.name,
                p.slug,
                p.tracker_url,
                lp.role,
                CAST(lp.is_active AS BOOLEAN) AS is_active,
                lp.season,
                t.id AS team_id,
                t.name AS team_name,
                t.color AS team_color,
                t.slug AS team_slug
            FROM league_players lp
            JOIN players p ON lp.player_id = p.id
            LEFT JOIN teams t ON lp.team_id = t.id
            WHERE lp.league_id = ? AND CAST(lp.is_active AS BOOLEAN)
            ORDER BY t.name, p.name
            """,
            [league_id],
        )

    def get_player_summary(self, league_id: str, player_id: str) -> dict:
        """Aggregate stats for one player over the league's completed games.

        Returns dict with: games_played, total_kills, total_deaths,
        total_assists, total_damage, total_mitigated, avg_kills,
        avg_deaths, avg_assists, avg_damage (averages None without games)
        """
        results = self._query(
            """
            SELECT
                COUNT(pgs.id) AS games_played,
                CAST(COALESCE(SUM(CAST(pgs.kills AS INTEGER)), 0) AS BIGINT) AS total_kills,
                CAST(COALESCE(SUM(CAST(pgs.deaths AS INTEGER)), 0) AS BIGINT) AS total_deaths,
                CAST(COALESCE(SUM(CAST(pgs.assists AS INTEGER)), 0) AS BIGINT) AS total_assists,
                CAST(COALESCE(SUM(CAST(pgs.damage AS INTEGER)), 0) AS BIGINT) AS total_damage,
                CAST(COALESCE(SUM(CAST(pgs.mitigated AS INTEGER)), 0) AS BIGINT) AS total_mitigated,
                AVG(CAST(pgs.kills AS DOUBLE)) AS avg_kills,
                AVG(CAST(pgs.deaths AS DOUBLE)) AS avg_deaths,
                AVG(CAST(pgs.assists AS DOUBLE)) AS avg_assists,
                AVG(CAST(pgs.damage AS DOUBLE)) AS avg_damage
            FROM player_game_stats pgs
            JOIN games g ON pgs.game_id = g.id
            JOIN matches m ON g.match_id = m.id
            JOIN league_players lp ON pgs.league_player_id = lp.id
            WHERE lp.player_id = ?
              AND m.league_id = ?
              AND CAST(g.is_completed AS BOOLEAN)
            """,
            [player_id, league_id],
        )
        return results[0] if results else {}

    def get_matches(self, league_id: str, limit: int | None = None) -> list[dict]:
        """Matches of a league, newest first.

        Returns dicts with: id, league_id, date, created_at, team ids,
        team1_/team2_ name, color, slug, winner_name, winner_color, games_count
        """
        limit_clause = f"LIMIT {int(limit)}" if limit else ""
        return self._query(
            f"""
            SELECT
                m.id,
                m.league_id,
                m.date,
                m.created_at,
                m.team1_id,
                m.team2_id,
                m.winner_team_id,
                t1.name AS team1_name,
                t1.color AS team1_color,
                t1.slug AS team1_slug,
                t2.name AS team2_name,
                t2.color AS team2_color,
                t2.slug AS team2_slug,
                tw.name AS winner_name,
                tw.color AS winner_color,
                COUNT(g.id) AS games_count
            FROM matches m
            JOIN teams t1 ON m.team1_id = t1.id
            JOIN teams t2 ON m.team2_id = t2.id
            LEFT JOIN teams tw ON m.winner_team_id = tw.id
            LEFT JOIN games g ON m.id = g.match_id
            WHERE m.league_id = ?
            GROUP BY ALL
            ORDER BY m.date DESC, m.created_at DESC
            {limit_clause}
            """,
            [league_id],
        )

    def get_match_counts(self, league_id: str) -> dict:
        """Returns dict with: total_matches, total_games (completed only)"""
        results = self._query(
            """
            SELECT
                COUNT(DISTINCT m.id) AS total_matches,
                COUNT(g.id) AS total_games
            FROM matches m
            LEFT JOIN games g ON m.id = g.match_id AND CAST(g.is_completed AS BOOLEAN)
            WHERE m.league_id = ?
            """,
            [league_id],
        )
        return results[0]

    def count_teams(self, league_id: str) -> int:
        results = self._query(
            "SELECT COUNT(id) AS total_teams FROM teams WHERE league_id = ?",
            [league_id],
        )
        return results[0]["total_teams"] or 0

    def count_active_players(self, league_id: str) -> int:
        results = self._query(
            """
            SELECT COUNT(id) AS total_players
            FROM league_players
            WHERE league_id = ? AND CAST(is_active AS BOOLEAN)
            """,
            [league_id],
        )
        return results[0]["total_players"] or 0
