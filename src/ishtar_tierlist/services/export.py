"""JSON snapshot export of the tier list."""

from datetime import datetime, timezone
from typing import Optional

EXPORT_FILENAME = "rankings.json"


def build_rankings_export(snapshot: dict[str, list[str]], now: Optional[datetime] = None) -> dict:
    """Downloadable document: the rankings plus when they were exported."""
    now = now or datetime.now(timezone.utc)
    return {
        "rankings": {role: list(players) for role, players in snapshot.items()},
        "timestamp": now.isoformat(),
    }
