"""Centralized game settings for Klondike - rule toggles, scoring and player preferences."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from solitaire.logic.enums import CardSize
from solitaire.logic.exceptions import UnsupportedSettingsError

SUPPORTED_DRAW_COUNTS = (1, 3)
DEFAULT_DRAW_COUNT = 3
MIN_HISTORY_CAPACITY = 20
MAX_HISTORY_CAPACITY = 50


class GameSettings(BaseModel):
    """
    Rule configuration for a Klondike game.

    Scoring constants follow standard Windows-style Klondike scoring. The draw
    count is a player preference (see Preferences), not a rule setting.
    """

    model_config = ConfigDict(frozen=True)

    # --- Rules ---
    allow_foundation_to_tableau: bool = True

    # --- Undo ---
    history_capacity: int = MAX_HISTORY_CAPACITY

    # --- Scoring ---
    waste_to_foundation_points: int = 10
    waste_to_tableau_points: int = 5
    tableau_to_foundation_points: int = 10
    reveal_card_points: int = 5
    foundation_to_tableau_points: int = -15


class Preferences(BaseModel):
    """Player preferences persisted alongside the game (draw count and presentation toggles)."""

    model_config = ConfigDict(frozen=True)

    draw_count: int = DEFAULT_DRAW_COUNT
    sound: bool = True
    animations: bool = True
    card_size: CardSize = CardSize.NORMAL

    @field_validator("draw_count")
    @classmethod
    def _validate_draw_count(cls, v: int) -> int:
        if v not in SUPPORTED_DRAW_COUNTS:
            raise ValueError(f"draw_count must be one of {SUPPORTED_DRAW_COUNTS}, got {v}")
        return v


def validate_settings(settings: GameSettings) -> None:
    """Validate that all settings values are supported by the engine.

    Raises UnsupportedSettingsError listing every unsupported value.
    """
    errors: list[str] = []

    if not MIN_HISTORY_CAPACITY <= settings.history_capacity <= MAX_HISTORY_CAPACITY:
        errors.append(
            f"history_capacity={settings.history_capacity} is not supported "
            f"(must be {MIN_HISTORY_CAPACITY}-{MAX_HISTORY_CAPACITY})"
        )

    if errors:
        raise UnsupportedSettingsError("; ".join(errors))
