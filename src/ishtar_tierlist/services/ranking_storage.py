"""Persistence of ranking snapshots in a durable key-value slot.

The envelope written under ``tierlist-rankings`` looks like::

    {"rankings": {"SOLO": [...], "JUNGLE": [...], ...},
     "savedAt": "2026-01-15T14:00:00+00:00",
     "version": "1.0"}

Loading never raises: a missing, unparsable or incomplete envelope is
reported as "nothing saved".
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Protocol

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from ishtar_tierlist.models.ranking import ROLE_COLUMNS, RankingState

logger = logging.getLogger(__name__)

RANKINGS_STORAGE_KEY = "tierlist-rankings"
ENVELOPE_VERSION = "1.0"


class KeyValueStore(Protocol):
    """Minimal string key-value slot (the browser's localStorage shape)."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store, used in tests and when no directory is configured."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """One ``<key>.json`` file per key inside a directory."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Atomic replace
        tmp_path = self._path(key).with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(self._path(key))

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class RankingEnvelope(BaseModel):
    """Versioned wrapper around a persisted ranking snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    rankings: dict[str, list[str]]
    # Older envelopes used "timestamp" for this field
    saved_at: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("savedAt", "timestamp"),
        serialization_alias="savedAt",
    )
    version: str = ENVELOPE_VERSION

    @field_validator("rankings", mode="before")
    @classmethod
    def require_every_column(cls, value: Any) -> dict[str, Any]:
        if not isinstance(value, dict):
            raise ValueError("rankings must be an object")
        missing = [role.value for role in ROLE_COLUMNS if not isinstance(value.get(role.value), list)]
        if missing:
            raise ValueError(f"missing role columns: {', '.join(missing)}")
        # Unknown keys are dropped
        return {role.value: value[role.value] for role in ROLE_COLUMNS}


class RankingStorage:
    """Save, load and clear the ranking envelope in a key-value store."""

    def __init__(self, store: KeyValueStore, key: str = RANKINGS_STORAGE_KEY):
        self.store = store
        self.key = key

    def save(self, state: RankingState) -> bool:
        """Persist ``state``. Entirely empty states are skipped.

        Returns:
            True if the envelope was written
        """
        if not state.has_entries:
            logger.debug("Skipping save of empty rankings")
            return False

        envelope = RankingEnvelope(
            rankings=state.to_dict(),
            saved_at=datetime.now(timezone.utc).isoformat(),
        )
        try:
            self.store.set(self.key, envelope.model_dump_json(by_alias=True))
        except OSError as e:
            logger.error(f"Failed to save rankings: {e}")
            return False
        logger.info("Rankings saved")
        return True

    def load(self) -> Optional[RankingState]:
        """Load the saved rankings, or None if absent or invalid."""
        try:
            raw = self.store.get(self.key)
        except OSError as e:
            logger.error(f"Failed to read saved rankings: {e}")
            return None
        except UnicodeDecodeError as e:
            logger.warning(f"Saved rankings are not valid UTF-8: {e}")
            return None
        if raw is None:
            return None

        try:
            envelope = RankingEnvelope.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Invalid rankings data in storage: {e.error_count()} error(s)")
            return None

        logger.info(f"Rankings loaded (saved at {envelope.saved_at})")
        return RankingState.from_mapping(envelope.rankings)

    def clear(self) -> None:
        """Remove the saved envelope unconditionally."""
        try:
            self.store.delete(self.key)
        except OSError as e:
            logger.error(f"Failed to clear saved rankings: {e}")
            return
        logger.info("Rankings cleared from storage")

    def has_saved(self) -> bool:
        try:
            return self.store.get(self.key) is not None
        except OSError as e:
            logger.error(f"Failed to check saved rankings: {e}")
            return False
        except UnicodeDecodeError:
            # Unreadable counts as nothing saved, like load()
            return False
