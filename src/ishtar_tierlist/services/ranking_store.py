"""Committed tier list state and its mutations.

The module-level functions are pure ``RankingState -> RankingState``
transformations. Out-of-range indices never raise; they return the state
unchanged. ``RankingStore`` owns the committed state, applies those
transformations and auto-saves every change.
"""

import logging
from typing import Optional

from ishtar_tierlist.models.ranking import RankingState, RoleColumn
from ishtar_tierlist.services.ranking_storage import RankingStorage

logger = logging.getLogger(__name__)


def _clamp(index: int | None, length: int) -> int:
    if index is None:
        return length
    return max(0, min(index, length))


def _in_range(index: int, length: int) -> bool:
    return 0 <= index < length


def insert_player(
    state: RankingState, column: RoleColumn, index: int | None, player: str
) -> RankingState:
    """Insert ``player`` at ``index`` (clamped to [0, len]; None appends)."""
    players = list(state[column])
    players.insert(_clamp(index, len(players)), player)
    return state.replace(column, players)


def move_within_column(
    state: RankingState, column: RoleColumn, from_index: int, to_index: int | None
) -> RankingState:
    """Move a player inside one column.

    ``to_index`` is read against the sequence after the player was removed.
    """
    players = list(state[column])
    if not _in_range(from_index, len(players)) or from_index == to_index:
        return state
    moved = players.pop(from_index)
    players.insert(_clamp(to_index, len(players)), moved)
    return state.replace(column, players)


def move_between_columns(
    state: RankingState,
    from_column: RoleColumn,
    from_index: int,
    to_column: RoleColumn,
    to_index: int | None,
) -> RankingState:
    """Move a player from one column into another."""
    if from_column == to_column:
        return move_within_column(state, from_column, from_index, to_index)

    source = list(state[from_column])
    if not _in_range(from_index, len(source)):
        return state
    moved = source.pop(from_index)
    target = list(state[to_column])
    target.insert(_clamp(to_index, len(target)), moved)
    return state.replace(from_column, source).replace(to_column, target)


def remove_player(state: RankingState, column: RoleColumn, index: int) -> RankingState:
    """Remove the player at ``index``."""
    players = list(state[column])
    if not _in_range(index, len(players)):
        return state
    del players[index]
    return state.replace(column, players)


class RankingStore:
    """Owner of the committed ranking state."""

    def __init__(
        self,
        storage: Optional[RankingStorage] = None,
        initial: Optional[RankingState] = None,
        allow_duplicates: bool = True,
    ):
        """Initialize the store.

        Args:
            storage: Where committed changes are saved; None keeps state in memory only
            initial: Starting state, defaults to all columns empty
            allow_duplicates: When False, inserting a player who is already
                ranked somewhere is ignored
        """
        self.storage = storage
        self.allow_duplicates = allow_duplicates
        self._state = initial.copy() if initial else RankingState.empty()

    @classmethod
    def restore(cls, storage: RankingStorage, allow_duplicates: bool = True) -> "RankingStore":
        """Create a store from whatever the storage holds, else empty."""
        saved = storage.load()
        return cls(storage=storage, initial=saved, allow_duplicates=allow_duplicates)

    @property
    def state(self) -> RankingState:
        """Committed state. Callers get a copy; mutate through the operations."""
        return self._state.copy()

    def snapshot(self) -> dict[str, list[str]]:
        """Read-only plain snapshot for export and presentation."""
        return self._state.to_dict()

    def _commit(self, new_state: RankingState) -> bool:
        if new_state == self._state:
            return False
        self._state = new_state
        if self.storage is not None:
            self.storage.save(new_state)
        return True

    def insert(self, column: RoleColumn, index: int | None, player: str) -> bool:
        """Place ``player`` into ``column``. Returns True if state changed."""
        if not self.allow_duplicates and self._state.contains(player):
            logger.warning(f"Ignoring insert of {player}: already ranked")
            return False
        return self._commit(insert_player(self._state, column, index, player))

    def move_within_column(self, column: RoleColumn, from_index: int, to_index: int | None) -> bool:
        return self._commit(move_within_column(self._state, column, from_index, to_index))

    def move_between_columns(
        self,
        from_column: RoleColumn,
        from_index: int,
        to_column: RoleColumn,
        to_index: int | None,
    ) -> bool:
        return self._commit(
            move_between_columns(self._state, from_column, from_index, to_column, to_index)
        )

    def remove(self, column: RoleColumn, index: int) -> bool:
        return self._commit(remove_player(self._state, column, index))

    def clear(self) -> None:
        """Empty every column and delete the saved envelope."""
        self._state = RankingState.empty()
        if self.storage is not None:
            self.storage.clear()
        logger.info("Rankings cleared")
