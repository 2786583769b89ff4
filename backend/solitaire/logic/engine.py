"""
Stateful Klondike engine for a single play session.

SolitaireEngine owns the current frozen GameState together with the undo
history, the game clock, lifetime stats and player preferences. The pure
functions in moves.py raise GameRuleError subclasses; the engine catches
them here and reports False/None instead. Persistence failures are logged
and never affect in-memory state.

Every successful move follows the same sequence:
snapshot -> apply -> persist -> win check.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from pydantic import ValidationError

from shared.storage import MemoryBlobStorage
from solitaire.logic import moves
from solitaire.logic.clock import GameClock
from solitaire.logic.deck import deal_from_seed
from solitaire.logic.exceptions import GameRuleError
from solitaire.logic.hint import can_auto_complete, find_hint
from solitaire.logic.history import MoveHistory
from solitaire.logic.rng import generate_seed, validate_seed_hex
from solitaire.logic.rules import can_accept_on_foundation
from solitaire.logic.settings import GameSettings, Preferences, validate_settings
from solitaire.logic.state import NUM_FOUNDATIONS, NUM_TABLEAU, GameState, is_won
from solitaire.logic.stats import Stats, record_game_started, record_win
from solitaire.logic.types import GameResult, Hint
from solitaire.persistence.repository import GameRepository

if TYPE_CHECKING:
    from collections.abc import Callable
    from contextlib import AbstractContextManager

logger = structlog.get_logger()

DEFAULT_AUTOSAVE_INTERVAL_SECONDS = 5

T = TypeVar("T")


class SolitaireEngine:
    """
    One explicit instance per session; there is no module-level game.

    Stats and preferences are loaded from the repository at construction.
    No game exists until init() or load() is called; before that every move
    returns False and `state` is None.
    """

    def __init__(
        self,
        repository: GameRepository | None = None,
        *,
        settings: GameSettings | None = None,
        preferences: Preferences | None = None,
        autosave_interval_seconds: int = DEFAULT_AUTOSAVE_INTERVAL_SECONDS,
    ) -> None:
        self._settings = settings or GameSettings()
        validate_settings(self._settings)
        if autosave_interval_seconds <= 0:
            raise ValueError(f"Autosave interval must be positive, got {autosave_interval_seconds}")

        self._repository = repository or GameRepository(MemoryBlobStorage())
        self._autosave_interval = autosave_interval_seconds
        self._history = MoveHistory(self._settings.history_capacity)
        self._clock = GameClock()
        self._state: GameState | None = None
        self._win_recorded = False
        self._seconds_since_save = 0

        self._stats = self._read("stats", self._repository.load_stats, Stats())
        if preferences is None:
            preferences = self._read("settings", self._repository.load_settings, Preferences())
        self._preferences = preferences

    # --- read-only views ---

    @property
    def state(self) -> GameState | None:
        return self._state

    @property
    def stats(self) -> Stats:
        return self._stats

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    @property
    def settings(self) -> GameSettings:
        return self._settings

    @property
    def history_size(self) -> int:
        return len(self._history)

    @property
    def clock_running(self) -> bool:
        return self._clock.running

    # --- game lifecycle ---

    def init(self, seed: str | None = None) -> GameState:
        """
        Deal a new game and count it as started.

        A fresh random seed is generated when none is given; passing the seed
        of an earlier game redeals it exactly. Raises ValueError for a
        malformed seed. Leaving an unfinished game resets the win streak.
        """
        if seed is None:
            seed = generate_seed()
        else:
            validate_seed_hex(seed)

        abandoned = self._state is not None and not is_won(self._state)
        state = deal_from_seed(seed, draw_count=self._preferences.draw_count)
        self._begin(state, win_recorded=False)
        self._stats = record_game_started(self._stats, previous_game_abandoned=abandoned)

        with self._log_context():
            logger.info("new game dealt", draw_count=state.draw_count, abandoned_previous=abandoned)
        self._save_stats()
        self.save()
        return state

    def restart(self) -> bool:
        """
        Redeal the current game's seed with fresh score, moves, clock and history.

        Stats are untouched, and a deal that was already won does not count a
        second win. Returns False when there is no seeded game to restart.
        """
        if self._state is None or not self._state.seed:
            return False
        state = deal_from_seed(self._state.seed, draw_count=self._state.draw_count)
        self._begin(state, win_recorded=self._win_recorded)
        with self._log_context():
            logger.info("game restarted")
        self.save()
        return True

    def load(self) -> bool:
        """Restore the saved game. Falls back to init() and returns False when there is none."""
        state = self._read("game", self._repository.load_game, None)
        if state is None:
            self.init()
            return False
        self._begin(state, win_recorded=is_won(state))
        with self._log_context():
            logger.info("saved game restored", moves=state.moves, score=state.score)
        return True

    def save(self) -> bool:
        """Persist the current game. Returns False when nothing was written."""
        state = self._state
        if state is None:
            return False
        return self._write("game", lambda: self._repository.save_game(state))

    def clear_saved_game(self) -> bool:
        return self._write("game", self._repository.clear_saved_game)

    # --- moves ---

    def draw_from_stock(self) -> bool:
        """Draw from the stock, or recycle the waste when the stock is empty."""
        return self._apply("draw_from_stock", moves.draw_from_stock)

    def waste_to_foundation(self, foundation_index: int) -> bool:
        return self._apply(
            "waste_to_foundation",
            lambda s: moves.waste_to_foundation(s, foundation_index, self._settings),
        )

    def waste_to_tableau(self, tableau_index: int) -> bool:
        return self._apply(
            "waste_to_tableau",
            lambda s: moves.waste_to_tableau(s, tableau_index, self._settings),
        )

    def tableau_to_foundation(self, tableau_index: int, foundation_index: int) -> bool:
        return self._apply(
            "tableau_to_foundation",
            lambda s: moves.tableau_to_foundation(s, tableau_index, foundation_index, self._settings),
        )

    def tableau_to_tableau(self, source_index: int, card_index: int, target_index: int) -> bool:
        return self._apply(
            "tableau_to_tableau",
            lambda s: moves.tableau_to_tableau(s, source_index, card_index, target_index, self._settings),
        )

    def foundation_to_tableau(self, foundation_index: int, tableau_index: int) -> bool:
        return self._apply(
            "foundation_to_tableau",
            lambda s: moves.foundation_to_tableau(s, foundation_index, tableau_index, self._settings),
        )

    def auto_move_to_foundation(self) -> bool:
        """Play the first card that can go up (waste first, then tableau 0..6)."""
        return self._apply(
            "auto_move_to_foundation",
            lambda s: moves.auto_move_to_foundation(s, self._settings),
        )

    def undo(self) -> bool:
        """
        Restore the state before the last successful move.

        Piles, score and moves roll back; elapsed time does not. Undoing out
        of a won game restarts the clock but never un-counts the win.
        """
        if self._state is None:
            return False
        snapshot = self._history.pop()
        if snapshot is None:
            return False
        self._state = snapshot.model_copy(update={"elapsed_seconds": self._state.elapsed_seconds})
        if not is_won(self._state):
            self._clock.start()
        with self._log_context():
            logger.debug("move undone", moves=self._state.moves, history_size=len(self._history))
        self.save()
        return True

    # --- assistance ---

    def find_hint(self) -> Hint | None:
        if self._state is None:
            return None
        return find_hint(self._state)

    def can_auto_complete(self) -> bool:
        return self._state is not None and can_auto_complete(self._state)

    def auto_complete(self) -> bool:
        """
        Play every remaining card to the foundations.

        Only runs when no hidden information remains. Each step is a normal
        tableau-to-foundation move (history, score and moves included).
        Returns whether the game is won afterwards.
        """
        if not self.can_auto_complete():
            return False
        moved = True
        while moved and not self.is_won():
            moved = False
            for tableau_index in range(NUM_TABLEAU):
                foundation_index = self._foundation_for_tableau_top(tableau_index)
                if foundation_index is not None and self.tableau_to_foundation(tableau_index, foundation_index):
                    moved = True
        return self.is_won()

    # --- win and stats ---

    def is_won(self) -> bool:
        return self._state is not None and is_won(self._state)

    def win_game(self) -> GameResult | None:
        """
        Summarize a won game, recording it in the stats the first time.

        Returns None when the game is not won. Calling it again for the same
        game returns the result without touching the stats.
        """
        state = self._state
        if state is None or not is_won(state):
            return None
        result = GameResult(time=state.elapsed_seconds, moves=state.moves, score=state.score)
        if self._win_recorded:
            return result

        self._win_recorded = True
        self._clock.stop()
        self._stats = record_win(self._stats, result)
        with self._log_context():
            logger.info("game won", score=result.score, moves=result.moves, time=result.time)
        self._save_stats()
        return result

    def reset_stats(self) -> None:
        self._stats = Stats()
        logger.info("stats reset")
        self._save_stats()

    # --- clock and preferences ---

    def tick(self, seconds: int = 1) -> int:
        """
        Advance elapsed game time. Returns the seconds actually counted.

        Ticks are ignored before a game exists, after a win and while the
        clock is stopped. They add no history entry and no move.
        """
        state = self._state
        added = self._clock.tick(seconds)
        if state is None or added == 0:
            return 0
        self._state = state.model_copy(update={"elapsed_seconds": state.elapsed_seconds + added})
        self._seconds_since_save += added
        if self._seconds_since_save >= self._autosave_interval:
            self._seconds_since_save = 0
            self.save()
        return added

    def update_preferences(self, **changes: Any) -> bool:  # noqa: ANN401
        """
        Change player preferences and persist them.

        A new draw count applies from the next deal. Returns False, changing
        nothing, for unknown names or invalid values.
        """
        unknown = sorted(set(changes) - set(Preferences.model_fields))
        if unknown:
            logger.debug("preferences rejected", unknown=unknown)
            return False
        try:
            updated = Preferences.model_validate({**self._preferences.model_dump(), **changes})
        except ValidationError as e:
            logger.debug("preferences rejected", error=str(e))
            return False
        self._preferences = updated
        self._write("settings", lambda: self._repository.save_settings(updated))
        return True

    # --- internals ---

    def _current(self) -> GameState:
        if self._state is None:
            raise RuntimeError("No game in progress")
        return self._state

    def _begin(self, state: GameState, *, win_recorded: bool) -> None:
        self._state = state
        self._history.clear()
        self._seconds_since_save = 0
        self._win_recorded = win_recorded or is_won(state)
        if is_won(state):
            self._clock.stop()
        else:
            self._clock.start()

    def _apply(self, move: str, transition: Callable[[GameState], GameState]) -> bool:
        before = self._state
        if before is None:
            logger.debug("move without a game", move=move)
            return False
        with self._log_context():
            try:
                after = transition(before)
            except GameRuleError as e:
                logger.debug("move rejected", move=move, reason=str(e))
                return False
            self._history.push(before)
            self._state = after
            logger.debug("move applied", move=move, score=after.score, moves=after.moves)
        self.save()
        if is_won(after):
            self._clock.stop()
            if not self._win_recorded:
                self.win_game()
        return True

    def _foundation_for_tableau_top(self, tableau_index: int) -> int | None:
        state = self._current()
        pile = state.tableau[tableau_index]
        if not pile:
            return None
        for foundation_index in range(NUM_FOUNDATIONS):
            if can_accept_on_foundation(pile[-1], state.foundations[foundation_index]):
                return foundation_index
        return None

    def _save_stats(self) -> None:
        stats = self._stats
        self._write("stats", lambda: self._repository.save_stats(stats))

    def _read(self, what: str, load: Callable[[], T], fallback: T) -> T:
        try:
            return load()
        except (OSError, ValueError):
            logger.exception("failed to read saved data", what=what)
            return fallback

    def _write(self, what: str, write: Callable[[], None]) -> bool:
        try:
            write()
        except (OSError, ValueError):
            logger.exception("failed to persist", what=what)
            return False
        return True

    def _log_context(self) -> AbstractContextManager[Any]:
        seed = self._state.seed if self._state is not None else ""
        return structlog.contextvars.bound_contextvars(game_seed=seed)
