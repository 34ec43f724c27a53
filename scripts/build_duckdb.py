#!/usr/bin/env python3
"""Build the league DuckDB database from CSV data files.

Run this once after updating CSV files, or in CI/CD.
The resulting .duckdb file is used by LeagueRepository for queries.

Expected CSV files (one table each): leagues, teams, players,
league_players, matches, games, player_game_stats.

Usage:
    python scripts/build_duckdb.py [csv_dir] [output_path]

Default csv_dir: data/csv (relative to repo root)
Default output_path: data/league_data.duckdb
"""
import duckdb
from pathlib import Path
import sys


def build_duckdb(data_path: Path, output_path: Path | None = None) -> Path:
    """Build DuckDB database from CSV files in data_path.

    Args:
        data_path: Directory containing CSV files
        output_path: Where to write the .duckdb file (default: data_path/league_data.duckdb)

    Returns:
        Path to the created database file
    """
    if output_path is None:
        output_path = data_path / "league_data.duckdb"

    # Remove old DB if exists
    if output_path.exists():
        output_path.unlink()
        print(f"Removed existing {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    conn = duckdb.connect(str(output_path))

    csv_files = list(data_path.glob("*.csv"))
    if not csv_files:
        print(f"Warning: No CSV files found in {data_path}")
        conn.close()
        return output_path

    print(f"Building {output_path} from {len(csv_files)} CSV files...")

    for csv_file in sorted(csv_files):
        # Sanitize table name (replace hyphens with underscores)
        table_name = csv_file.stem.replace("-", "_")

        try:
            # all_varchar keeps ids as strings; queries cast what they aggregate
            conn.execute(f"""
                CREATE TABLE {table_name} AS
                SELECT * FROM read_csv('{csv_file}', header=true, all_varchar=true)
            """)
            row_count = conn.execute(f"SELECT COUNT(*) FROM {table_name}").fetchone()[0]
            print(f"  ✓ {table_name}: {row_count:,} rows")
        except duckdb.Error as e:
            print(f"  ✗ {table_name}: {e}")

    tables = conn.execute("SHOW TABLES").fetchall()
    print(f"\nCreated {len(tables)} tables in {output_path}")

    conn.close()
    return output_path


def main():
    repo_root = Path(__file__).parent.parent
    data_path = Path(sys.argv[1]) if len(sys.argv) > 1 else repo_root / "data" / "csv"
    output_path = Path(sys.argv[2]) if len(sys.argv) > 2 else repo_root / "data" / "league_data.duckdb"

    if not data_path.exists():
        print(f"Error: Data path not found: {data_path}")
        print(f"Make sure CSV files exist at: {data_path}")
        sys.exit(1)

    db_path = build_duckdb(data_path, output_path)
    print(f"\nDone! Database ready at: {db_path}")


if __name__ == "__main__":
    main()
