"""
Tick-driven game clock.

The engine never reads wall-clock time. The presentation layer (or any
driver) calls tick() once per second; the clock only decides whether a tick
counts. Ticks are additive and commute with every move operation.
"""


class GameClock:
    """Counts elapsed game seconds between start() and stop()."""

    def __init__(self) -> None:
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    def tick(self, seconds: int = 1) -> int:
        """Return the number of seconds this tick adds (0 while stopped)."""
        if seconds < 0:
            raise ValueError(f"Tick must not be negative, got {seconds}")
        return seconds if self._running else 0


def format_time(seconds: int) -> str:
    """Format seconds as zero-padded MM:SS (minutes keep growing past 59)."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"
