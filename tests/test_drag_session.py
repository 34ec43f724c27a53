"""Tests for the drag-and-drop session state machine."""

import asyncio

import pytest

from ishtar_tierlist.models.ranking import HoverTarget, Ranked, RankingState, RoleColumn, Unplaced
from ishtar_tierlist.services.drag_session import MAX_GRACE_SECONDS, DragSession, DragStatus
from ishtar_tierlist.services.ranking_store import RankingStore

SOLO = RoleColumn.SOLO
JUNGLE = RoleColumn.JUNGLE
MID = RoleColumn.MID


@pytest.fixture
def store(solo_three, memory_storage):
    return RankingStore(storage=memory_storage, initial=solo_three)


@pytest.fixture
def session(store):
    return DragSession(store, grace_seconds=0)


class TestTransitions:
    def test_starts_idle(self, session):
        assert session.status == DragStatus.IDLE
        assert not session.is_active

    def test_start_hover_leave(self, session):
        session.start(Unplaced("Dave"))
        assert session.status == DragStatus.DRAGGING

        session.hover(MID, 0)
        assert session.status == DragStatus.HOVERING
        assert session.hover_target == HoverTarget(MID, 0)

        session.leave()
        assert session.status == DragStatus.DRAGGING
        assert session.hover_target is None

    def test_hover_without_drag_is_ignored(self, session):
        session.hover(MID, 0)
        assert session.status == DragStatus.IDLE
        assert session.hover_target is None

    def test_drop_returns_to_idle(self, session):
        session.start(Unplaced("Dave"))
        session.hover(MID, 0)
        session.drop()
        assert session.status == DragStatus.IDLE
        assert session.item is None
        assert session.hover_target is None

    def test_grace_is_capped(self, store):
        assert DragSession(store, grace_seconds=5).grace_seconds == MAX_GRACE_SECONDS


class TestCommit:
    def test_unplaced_into_empty_column(self):
        store = RankingStore()
        session = DragSession(store)
        session.start(Unplaced("Alice"))
        session.hover(SOLO, 0)

        assert session.drop() is True
        assert store.state == RankingState({SOLO: ["Alice"]})

    def test_reorder_forward_uses_adjusted_index(self, session, store):
        session.start(Ranked("Alice", SOLO, 0))
        session.hover(SOLO, 2)

        assert session.drop() is True
        assert store.state[SOLO] == ["Bob", "Alice", "Carol"]

    def test_reorder_backward(self, session, store):
        session.start(Ranked("Carol", SOLO, 2))
        session.hover(SOLO, 0)
        session.drop()
        assert store.state[SOLO] == ["Carol", "Alice", "Bob"]

    def test_reorder_to_end_zone(self, session, store):
        session.start(Ranked("Alice", SOLO, 0))
        session.hover(SOLO, 3)
        session.drop()
        assert store.state[SOLO] == ["Bob", "Carol", "Alice"]

    def test_drop_on_own_slot_is_noop(self, session, store, memory_storage):
        memory_storage.clear()
        session.start(Ranked("Bob", SOLO, 1))
        session.hover(SOLO, 2)  # Just below itself

        assert session.drop() is False
        assert store.state[SOLO] == ["Alice", "Bob", "Carol"]
        assert memory_storage.load() is None

    def test_move_between_columns(self, session, store):
        session.start(Ranked("Bob", SOLO, 1))
        session.hover(JUNGLE, None)
        session.drop()
        assert store.state[SOLO] == ["Alice", "Carol"]
        assert store.state[JUNGLE] == ["Bob"]

    def test_drop_target_overrides_hover(self, session, store):
        session.start(Unplaced("Dave"))
        session.hover(JUNGLE, 0)
        session.drop(HoverTarget(MID, None))
        assert store.state[MID] == ["Dave"]
        assert store.state[JUNGLE] == []

    def test_drop_without_target_is_noop(self, session, store, solo_three):
        session.start(Unplaced("Dave"))
        assert session.drop() is False
        assert store.state == solo_three
        assert session.status == DragStatus.IDLE

    def test_drop_when_idle_is_noop(self, session, store, solo_three):
        assert session.drop(HoverTarget(MID, 0)) is False
        assert store.state == solo_three

    def test_stale_origin_is_noop(self, session, store):
        session.start(Ranked("Bob", SOLO, 1))
        store.remove(SOLO, 0)  # Bob shifts to index 0
        session.hover(MID, 0)

        assert session.drop() is False
        assert store.state[MID] == []
        assert store.state[SOLO] == ["Bob", "Carol"]

    def test_commits_never_duplicate_players(self, session, store):
        moves = [
            (Ranked("Alice", SOLO, 0), HoverTarget(MID, 0)),
            (Ranked("Carol", SOLO, 1), HoverTarget(MID, 0)),
            (Ranked("Alice", MID, 1), HoverTarget(MID, 0)),
            (Ranked("Bob", SOLO, 0), HoverTarget(JUNGLE, None)),
            (Ranked("Alice", MID, 0), HoverTarget(MID, 2)),
        ]
        for payload, target in moves:
            session.start(payload)
            session.hover(target.column, target.index)
            session.drop()

        placed = [p for players in store.state.columns.values() for p in players]
        assert sorted(placed) == ["Alice", "Bob", "Carol"]
        assert store.state[MID] == ["Carol", "Alice"]


class TestPreview:
    def test_no_drag_shows_committed(self, session, solo_three):
        assert session.display_rankings() == solo_three

    def test_unplaced_preview_in_hovered_column_only(self, session):
        session.start(Unplaced("Dave"))
        session.hover(SOLO, 1)

        assert session.preview(SOLO) == ["Alice", "Dave", "Bob", "Carol"]
        assert session.preview(MID) == []

    def test_same_column_preview_moves_item(self, session):
        session.start(Ranked("Alice", SOLO, 0))
        session.hover(SOLO, 2)
        assert session.preview(SOLO) == ["Bob", "Alice", "Carol"]

    def test_same_column_preview_append(self, session):
        session.start(Ranked("Alice", SOLO, 0))
        session.hover(SOLO, None)
        assert session.preview(SOLO) == ["Bob", "Carol", "Alice"]

    def test_cross_column_preview_leaves_origin_unchanged(self, session):
        session.start(Ranked("Bob", SOLO, 1))
        session.hover(MID, None)

        display = session.display_rankings()
        assert display[MID] == ["Bob"]
        assert display[SOLO] == ["Alice", "Bob", "Carol"]

    def test_preview_matches_commit(self, session, store):
        session.start(Ranked("Carol", SOLO, 2))
        session.hover(SOLO, 1)
        preview = session.preview(SOLO)
        session.drop()
        assert store.state[SOLO] == preview

    def test_preview_never_mutates(self, session, store, solo_three):
        session.start(Ranked("Alice", SOLO, 0))
        for column, index in [(SOLO, 2), (MID, 0), (SOLO, None), (JUNGLE, 5)]:
            session.hover(column, index)
            session.display_rankings()
        assert store.state == solo_three

    def test_stale_origin_previews_no_change(self, session, store):
        session.start(Ranked("Bob", SOLO, 1))
        store.remove(SOLO, 0)  # Carol now sits at index 1
        session.hover(SOLO, 0)
        assert session.preview(SOLO) == ["Bob", "Carol"]

        session.hover(MID, 0)
        assert session.preview(MID) == []
        assert session.drop() is False


class TestCancel:
    @pytest.mark.anyio
    async def test_end_leaves_drag_started_during_grace(self, store):
        session = DragSession(store, grace_seconds=0.05)
        session.start(Unplaced("Dave"))
        pending_end = asyncio.create_task(session.end())
        await asyncio.sleep(0)

        session.cancel()
        session.start(Unplaced("Eve"))
        session.hover(MID, 0)

        assert await pending_end is False
        assert session.item.player == "Eve"
        assert session.status == DragStatus.HOVERING

    def test_cancel_after_many_hovers_keeps_state(self, session, store, solo_three):
        session.start(Ranked("Alice", SOLO, 0))
        for index in range(4):
            session.hover(SOLO, index)
            session.hover(MID, index)

        assert session.cancel() is True
        assert store.state == solo_three
        assert session.status == DragStatus.IDLE
        assert session.item is None

    def test_cancel_when_idle(self, session):
        assert session.cancel() is False

    @pytest.mark.anyio
    async def test_end_cancels_after_grace(self, store, solo_three):
        session = DragSession(store, grace_seconds=0.01)
        session.start(Unplaced("Dave"))
        session.hover(MID, 0)

        assert await session.end() is True
        assert session.item is None
        assert store.state == solo_three

    @pytest.mark.anyio
    async def test_end_after_drop_is_noop(self, session, store):
        session.start(Unplaced("Dave"))
        session.hover(MID, 0)
        session.drop()

        assert await session.end() is False
        assert store.state[MID] == ["Dave"]
