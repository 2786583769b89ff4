"""
Bounded undo history of frozen game-state snapshots.
"""

from collections import deque

from solitaire.logic.settings import MAX_HISTORY_CAPACITY
from solitaire.logic.state import GameState


class MoveHistory:
    """
    Last-in-first-out stack of snapshots with a fixed capacity.

    When full, pushing evicts the oldest snapshot. Snapshots are frozen
    GameState instances, so storing one is a reference, not a copy.
    """

    def __init__(self, capacity: int = MAX_HISTORY_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self._snapshots: deque[GameState] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._snapshots.maxlen or 0

    def __len__(self) -> int:
        return len(self._snapshots)

    def push(self, state: GameState) -> None:
        self._snapshots.append(state)

    def pop(self) -> GameState | None:
        """Remove and return the most recent snapshot, or None when empty."""
        if not self._snapshots:
            return None
        return self._snapshots.pop()

    def clear(self) -> None:
        self._snapshots.clear()
