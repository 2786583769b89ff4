"""
Game, stats and settings persistence on top of a BlobStorage.

Loads never raise for bad data: a missing blob is "nothing saved" and an
unreadable one is logged and treated the same way. Storage I/O errors
(OSError) propagate to the caller.
"""

import structlog
from pydantic import ValidationError

from shared.storage import BlobStorage
from solitaire.logic.exceptions import InvariantViolationError
from solitaire.logic.settings import Preferences
from solitaire.logic.state import GameState
from solitaire.logic.stats import Stats
from solitaire.persistence.schema import SavedGame, SavedSettings, SavedStats

logger = structlog.get_logger()

GAME_KEY = "solitaire_game"
STATS_KEY = "solitaire_stats"
SETTINGS_KEY = "solitaire_settings"


class GameRepository:
    """Reads and writes the three persisted blobs."""

    def __init__(self, storage: BlobStorage) -> None:
        self._storage = storage

    @property
    def storage(self) -> BlobStorage:
        return self._storage

    def save_game(self, state: GameState) -> None:
        self._storage.write(GAME_KEY, SavedGame.from_state(state).model_dump_json(by_alias=True))

    def load_game(self) -> GameState | None:
        """Return the saved game, or None if nothing valid is saved."""
        raw = self._storage.read(GAME_KEY)
        if raw is None:
            return None
        try:
            return SavedGame.model_validate_json(raw).to_state()
        except (ValueError, InvariantViolationError) as e:
            # ValidationError is a ValueError; both mean the blob is unusable
            logger.warning("discarding corrupt saved game", error=str(e))
            return None

    def clear_saved_game(self) -> None:
        self._storage.delete(GAME_KEY)

    def save_stats(self, stats: Stats) -> None:
        self._storage.write(STATS_KEY, SavedStats.from_stats(stats).model_dump_json(by_alias=True))

    def load_stats(self) -> Stats:
        """Return saved stats, or zeroed stats if none are saved or they are unreadable."""
        raw = self._storage.read(STATS_KEY)
        if raw is None:
            return Stats()
        try:
            return SavedStats.model_validate_json(raw).to_stats()
        except ValidationError as e:
            logger.warning("discarding corrupt stats", error=str(e))
            return Stats()

    def save_settings(self, preferences: Preferences) -> None:
        self._storage.write(
            SETTINGS_KEY, SavedSettings.from_preferences(preferences).model_dump_json(by_alias=True)
        )

    def load_settings(self) -> Preferences:
        """Return saved preferences, or defaults if none are saved or they are unreadable."""
        raw = self._storage.read(SETTINGS_KEY)
        if raw is None:
            return Preferences()
        try:
            return SavedSettings.model_validate_json(raw).to_preferences()
        except ValidationError as e:
            logger.warning("discarding corrupt settings", error=str(e))
            return Preferences()
