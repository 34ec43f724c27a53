"""Team and player roster models."""

from dataclasses import dataclass, field

from ishtar_tierlist.models.ranking import RoleColumn


@dataclass
class RosterPlayer:
    """A league player as listed in the roster."""

    name: str
    id: str
    tracker: str = ""
    role: RoleColumn | None = None


@dataclass
class Team:
    """A team and the names of its players, in roster order."""

    id: str
    name: str
    color: str
    players: list[str] = field(default_factory=list)
