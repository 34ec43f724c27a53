"""Drag-and-drop interaction state layered over the ranking store.

A drag goes IDLE -> DRAGGING -> (HOVERING)* -> COMMITTING -> IDLE, or
ends in CANCELLED -> IDLE when no drop lands. While a drag is in flight the
session only derives previews; committed state changes solely through the
store's operations on drop.
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

from ishtar_tierlist.models.ranking import (
    ROLE_COLUMNS,
    DragItem,
    DragPayload,
    HoverTarget,
    Ranked,
    RankingState,
    RoleColumn,
    Unplaced,
)
from ishtar_tierlist.services.ranking_store import RankingStore

logger = logging.getLogger(__name__)

DEFAULT_GRACE_SECONDS = 0.05
MAX_GRACE_SECONDS = 0.1


class DragStatus(str, Enum):
    """Status of the drag session."""

    IDLE = "idle"
    DRAGGING = "dragging"  # Item picked up, no drop surface under the pointer
    HOVERING = "hovering"  # Over a drop surface, preview active
    COMMITTING = "committing"  # Drop received, store being updated
    CANCELLED = "cancelled"  # Drag ended without a drop


class DragSession:
    """Tracks one in-flight drag against a RankingStore."""

    def __init__(self, store: RankingStore, grace_seconds: float = DEFAULT_GRACE_SECONDS):
        self.store = store
        self.grace_seconds = min(grace_seconds, MAX_GRACE_SECONDS)
        self.status = DragStatus.IDLE
        self.item: Optional[DragItem] = None
        self.hover_target: Optional[HoverTarget] = None

    @property
    def is_active(self) -> bool:
        return self.item is not None

    def _reset(self) -> None:
        self.item = None
        self.hover_target = None
        self.status = DragStatus.IDLE

    def start(self, payload: DragPayload) -> None:
        """Pick up a player from the roster pool or a ranking slot."""
        if self.item is not None:
            logger.debug(f"Replacing in-flight drag of {self.item.player}")
        self.item = DragItem(payload=payload)
        self.hover_target = None
        self.status = DragStatus.DRAGGING

    def hover(self, column: RoleColumn, index: int | None = None) -> None:
        """Pointer entered a drop surface of ``column`` at ``index``."""
        if self.item is None:
            return
        self.hover_target = HoverTarget(column=column, index=index)
        self.status = DragStatus.HOVERING

    def leave(self) -> None:
        """Pointer left every drop surface."""
        if self.item is None:
            return
        self.hover_target = None
        self.status = DragStatus.DRAGGING

    def _effective_index(self, column: RoleColumn, index: int | None, committed: list[str]) -> int | None:
        """Insertion index once the dragged player is taken out of its own column.

        Removing the player from an earlier slot shifts every later slot down
        by one, so hover indices past the origin move down by one too.
        """
        item = self.item
        if item is None or item.origin_column != column:
            return index
        if index is None:
            return len(committed) - 1
        if index > item.origin_index:
            return index - 1
        return index

    def preview(self, column: RoleColumn) -> list[str]:
        """What ``column`` would show if the drag were dropped now."""
        committed = self.store.state[column]
        if self.item is None or self.hover_target is None or self.hover_target.column != column:
            return committed

        item = self.item
        if isinstance(item.payload, Ranked) and not self._origin_matches(item.payload):
            # Stale origin, matches the refused drop
            return committed

        players = list(committed)
        if item.origin_column == column:
            del players[item.origin_index]
        index = self._effective_index(column, self.hover_target.index, committed)
        position = len(players) if index is None else max(0, min(index, len(players)))
        players.insert(position, item.player)
        return players

    def display_rankings(self) -> RankingState:
        """Preview of every column; only the hovered one differs from committed state."""
        return RankingState({role: self.preview(role) for role in ROLE_COLUMNS})

    def _origin_matches(self, payload: Ranked) -> bool:
        players = self.store.state[payload.column]
        return 0 <= payload.index < len(players) and players[payload.index] == payload.player

    def drop(self, target: Optional[HoverTarget] = None) -> bool:
        """Commit the drag at ``target``, or at the last hover target.

        Returns:
            True if the committed rankings changed
        """
        if self.item is None:
            return False
        if target is not None:
            self.hover_target = target
        if self.hover_target is None:
            logger.debug("Drop without a target, ignoring")
            self._reset()
            return False

        self.status = DragStatus.COMMITTING
        payload = self.item.payload
        column = self.hover_target.column
        index = self.hover_target.index
        changed = False

        if isinstance(payload, Unplaced):
            changed = self.store.insert(column, index, payload.player)
        elif not self._origin_matches(payload):
            logger.warning(
                f"Dropped {payload.player} but {payload.column.value}[{payload.index}] changed since drag start"
            )
        elif payload.column == column:
            committed = self.store.state[column]
            changed = self.store.move_within_column(
                column, payload.index, self._effective_index(column, index, committed)
            )
        else:
            changed = self.store.move_between_columns(payload.column, payload.index, column, index)

        self._reset()
        return changed

    def cancel(self) -> bool:
        """Abandon the drag without touching committed rankings.

        Returns:
            True if a drag was in flight
        """
        if self.item is None:
            return False
        self.status = DragStatus.CANCELLED
        logger.debug(f"Drag of {self.item.player} cancelled")
        self._reset()
        return True

    async def end(self, grace_seconds: Optional[float] = None) -> bool:
        """Drag-end or global pointer-up.

        Waits a short grace so a drop delivered right after can land first,
        then cancels the drag that was in flight when ``end`` was called.
        """
        delay = self.grace_seconds if grace_seconds is None else min(grace_seconds, MAX_GRACE_SECONDS)
        item = self.item
        if delay > 0:
            await asyncio.sleep(delay)
        # A drag started during the grace belongs to a later gesture
        if item is None or self.item is not item:
            return False
        return self.cancel()
