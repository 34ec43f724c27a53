"""Business logic services."""

from ishtar_tierlist.services.drag_session import DragSession, DragStatus
from ishtar_tierlist.services.query_cache import QueryCache
from ishtar_tierlist.services.ranking_storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    RankingStorage,
)
from ishtar_tierlist.services.ranking_store import RankingStore

__all__ = [
    "DragSession",
    "DragStatus",
    "QueryCache",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "RankingStorage",
    "RankingStore",
]
