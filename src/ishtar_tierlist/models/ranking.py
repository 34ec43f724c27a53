"""Ranking state, role columns and drag descriptors."""

from dataclasses import dataclass, field
from enum import Enum


class RoleColumn(str, Enum):
    """The five fixed tier list columns, in display order."""

    SOLO = "SOLO"
    JUNGLE = "JUNGLE"
    MID = "MID"
    SUPPORT = "SUPPORT"
    ADC = "ADC"


ROLE_COLUMNS: tuple[RoleColumn, ...] = tuple(RoleColumn)


@dataclass(frozen=True)
class PlayerRef:
    """A ranked player with display attributes resolved from the roster."""

    name: str
    team_name: str
    team_color: str


@dataclass
class RankingState:
    """Ordered player names per role column.

    Every column is always present. Order within a column is the ranking
    order. Values are player names, matching the persisted envelope.
    """

    columns: dict[RoleColumn, list[str]] = field(
        default_factory=lambda: {role: [] for role in ROLE_COLUMNS}
    )

    def __post_init__(self):
        # Fill any column the caller left out
        self.columns = {
            role: list(self.columns.get(role, [])) for role in ROLE_COLUMNS
        }

    @classmethod
    def empty(cls) -> "RankingState":
        return cls()

    @classmethod
    def from_mapping(cls, rankings: dict[str, list[str]]) -> "RankingState":
        """Build from a plain ``{"SOLO": [...], ...}`` mapping."""
        return cls({RoleColumn(key): list(value) for key, value in rankings.items()})

    def __getitem__(self, column: RoleColumn) -> list[str]:
        return self.columns[column]

    @property
    def has_entries(self) -> bool:
        """True if at least one column holds at least one player."""
        return any(players for players in self.columns.values())

    def copy(self) -> "RankingState":
        return RankingState({role: list(players) for role, players in self.columns.items()})

    def replace(self, column: RoleColumn, players: list[str]) -> "RankingState":
        """Return a copy with one column swapped out."""
        updated = self.copy()
        updated.columns[column] = list(players)
        return updated

    def contains(self, player: str) -> bool:
        return any(player in players for players in self.columns.values())

    def to_dict(self) -> dict[str, list[str]]:
        return {role.value: list(players) for role, players in self.columns.items()}


@dataclass(frozen=True)
class Unplaced:
    """Drag started from the roster pool."""

    player: str


@dataclass(frozen=True)
class Ranked:
    """Drag started from an existing ranking slot."""

    player: str
    column: RoleColumn
    index: int


DragPayload = Unplaced | Ranked


@dataclass(frozen=True)
class HoverTarget:
    """Current drop candidate. ``index=None`` appends at the end."""

    column: RoleColumn
    index: int | None = None


@dataclass
class DragItem:
    """An in-flight drag: the payload captured at drag start."""

    payload: DragPayload

    @property
    def player(self) -> str:
        return self.payload.player

    @property
    def origin_column(self) -> RoleColumn | None:
        if isinstance(self.payload, Ranked):
            return self.payload.column
        return None

    @property
    def origin_index(self) -> int | None:
        if isinstance(self.payload, Ranked):
            return self.payload.index
        return None
