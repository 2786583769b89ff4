"""
Pydantic models for values returned across the engine boundary.
"""

from pydantic import BaseModel, ConfigDict

from solitaire.logic.enums import HintType


class Hint(BaseModel):
    """
    A suggested legal move.

    `source`/`target` are pile indices; their meaning depends on `type`
    (waste moves have no source, draws have neither). `card_index` is set
    only for tableau-to-tableau moves.
    """

    model_config = ConfigDict(frozen=True)

    type: HintType
    source: int | None = None
    card_index: int | None = None
    target: int | None = None


class GameResult(BaseModel):
    """Summary of a won game."""

    model_config = ConfigDict(frozen=True)

    time: int
    moves: int
    score: int
