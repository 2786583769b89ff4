"""
Lifetime statistics across games.

Stats change only on game start and on a win (plus an explicit reset).
best_moves and best_time use 0 for "no win recorded yet".
"""

from pydantic import BaseModel, ConfigDict, Field

from solitaire.logic.types import GameResult


class Stats(BaseModel):
    model_config = ConfigDict(frozen=True)

    games_played: int = Field(default=0, ge=0)
    games_won: int = Field(default=0, ge=0)
    current_streak: int = Field(default=0, ge=0)
    best_streak: int = Field(default=0, ge=0)
    best_score: int = 0
    best_moves: int = Field(default=0, ge=0)
    best_time: int = Field(default=0, ge=0)
    total_time: int = Field(default=0, ge=0)

    @property
    def win_rate(self) -> int:
        """Percentage of started games that were won, rounded to an integer."""
        if self.games_played == 0:
            return 0
        return round(self.games_won / self.games_played * 100)

    @property
    def average_time(self) -> int:
        """Average seconds per won game, floored."""
        if self.games_won == 0:
            return 0
        return self.total_time // self.games_won


def record_game_started(stats: Stats, *, previous_game_abandoned: bool) -> Stats:
    """Count a new game. Abandoning an unfinished game breaks the win streak."""
    return stats.model_copy(
        update={
            "games_played": stats.games_played + 1,
            "current_streak": 0 if previous_game_abandoned else stats.current_streak,
        }
    )


def record_win(stats: Stats, result: GameResult) -> Stats:
    """Fold a won game into the stats."""
    streak = stats.current_streak + 1
    return stats.model_copy(
        update={
            "games_won": stats.games_won + 1,
            "current_streak": streak,
            "best_streak": max(stats.best_streak, streak),
            "best_score": max(stats.best_score, result.score),
            "best_moves": _improved(stats.best_moves, result.moves),
            "best_time": _improved(stats.best_time, result.time),
            "total_time": stats.total_time + result.time,
        }
    )


def _improved(best: int, value: int) -> int:
    # 0 means unset; lower is better
    if best == 0 or value < best:
        return value
    return best
