"""Shared fixtures: synthetic league database and in-memory rankings."""

import csv
from pathlib import Path

import duckdb
import pytest

from ishtar_tierlist.models.ranking import RankingState, RoleColumn
from ishtar_tierlist.services.ranking_storage import InMemoryKeyValueStore, RankingStorage


def _write_csv(path: Path, fieldnames: list[str], rows: list[dict]) -> None:
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, quoting=csv.QUOTE_ALL)
        writer.writeheader()
        writer.writerows(rows)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def league_db(tmp_path) -> Path:
    """DuckDB file with one league, two teams, one match of two games."""
    csv_dir = tmp_path / "csv"
    csv_dir.mkdir()

    _write_csv(csv_dir / "leagues.csv", ["id", "name", "slug"], [
        {"id": "1", "name": "Babylon League", "slug": "babylon-league"},
        {"id": "2", "name": "Akkad Cup", "slug": "akkad-cup"},
    ])
    _write_csv(csv_dir / "teams.csv", ["id", "league_id", "name", "slug", "color"], [
        {"id": "10", "league_id": "1", "name": "Sun Lions", "slug": "sun-lions", "color": "#d97706"},
        {"id": "11", "league_id": "1", "name": "River Gate", "slug": "river-gate", "color": "#2563eb"},
        {"id": "20", "league_id": "2", "name": "Akkad Bulls", "slug": "akkad-bulls", "color": "#16a34a"},
    ])
    _write_csv(csv_dir / "players.csv", ["id", "name", "slug", "tracker_url"], [
        {"id": "100", "name": "Ashur", "slug": "ashur", "tracker_url": "https://tracker.example/ashur"},
        {"id": "101", "name": "Enlil", "slug": "enlil", "tracker_url": ""},
        {"id": "102", "name": "Retired", "slug": "retired", "tracker_url": ""},
        {"id": "110", "name": "Marduk", "slug": "marduk", "tracker_url": ""},
    ])
    _write_csv(
        csv_dir / "league_players.csv",
        ["id", "league_id", "player_id", "team_id", "role", "is_active", "season"],
        [
            {"id": "1000", "league_id": "1", "player_id": "100", "team_id": "10", "role": "solo", "is_active": "true", "season": "1"},
            {"id": "1001", "league_id": "1", "player_id": "101", "team_id": "10", "role": "mid", "is_active": "true", "season": "1"},
            {"id": "1002", "league_id": "1", "player_id": "102", "team_id": "10", "role": "adc", "is_active": "false", "season": "1"},
            {"id": "1010", "league_id": "1", "player_id": "110", "team_id": "11", "role": "jungle", "is_active": "true", "season": "1"},
        ],
    )
    _write_csv(
        csv_dir / "matches.csv",
        ["id", "league_id", "team1_id", "team2_id", "winner_team_id", "date", "created_at"],
        [
            {"id": "500", "league_id": "1", "team1_id": "10", "team2_id": "11", "winner_team_id": "10", "date": "2026-01-10", "created_at": "2026-01-10T18:00:00"},
            {"id": "501", "league_id": "1", "team1_id": "11", "team2_id": "10", "winner_team_id": "", "date": "2026-01-17", "created_at": "2026-01-17T18:00:00"},
        ],
    )
    _write_csv(csv_dir / "games.csv", ["id", "match_id", "game_number", "is_completed"], [
        {"id": "600", "match_id": "500", "game_number": "1", "is_completed": "true"},
        {"id": "601", "match_id": "500", "game_number": "2", "is_completed": "true"},
        {"id": "602", "match_id": "501", "game_number": "1", "is_completed": "false"},
    ])
    _write_csv(
        csv_dir / "player_game_stats.csv",
        ["id", "game_id", "league_player_id", "kills", "deaths", "assists", "damage", "mitigated"],
        [
            {"id": "7000", "game_id": "600", "league_player_id": "1000", "kills": "5", "deaths": "2", "assists": "4", "damage": "18000", "mitigated": "12000"},
            {"id": "7001", "game_id": "601", "league_player_id": "1000", "kills": "3", "deaths": "2", "assists": "6", "damage": "14000", "mitigated": "9000"},
            # Incomplete game, excluded from summaries
            {"id": "7002", "game_id": "602", "league_player_id": "1000", "kills": "9", "deaths": "0", "assists": "0", "damage": "30000", "mitigated": "1000"},
            {"id": "7003", "game_id": "600", "league_player_id": "1001", "kills": "2", "deaths": "0", "assists": "6", "damage": "20000", "mitigated": "3000"},
        ],
    )

    db_path = tmp_path / "league_data.duckdb"
    conn = duckdb.connect(str(db_path))
    for csv_file in csv_dir.glob("*.csv"):
        conn.execute(f"""
            CREATE TABLE {csv_file.stem} AS
            SELECT * FROM read_csv('{csv_file}', header=true, all_varchar=true)
        """)
    conn.close()
    return db_path


@pytest.fixture
def memory_storage() -> RankingStorage:
    return RankingStorage(InMemoryKeyValueStore())


@pytest.fixture
def solo_three() -> RankingState:
    """SOLO: Alice, Bob, Carol; every other column empty."""
    return RankingState({RoleColumn.SOLO: ["Alice", "Bob", "Carol"]})
