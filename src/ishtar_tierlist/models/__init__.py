"""Data models for the league tier list."""

from ishtar_tierlist.models.ranking import (
    ROLE_COLUMNS,
    DragItem,
    DragPayload,
    HoverTarget,
    PlayerRef,
    Ranked,
    RankingState,
    RoleColumn,
    Unplaced,
)
from ishtar_tierlist.models.team import RosterPlayer, Team

__all__ = [
    "ROLE_COLUMNS",
    "DragItem",
    "DragPayload",
    "HoverTarget",
    "PlayerRef",
    "Ranked",
    "RankingState",
    "RoleColumn",
    "Unplaced",
    "RosterPlayer",
    "Team",
]
