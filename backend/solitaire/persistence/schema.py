"""
Pydantic schemas for persisted blobs.

Blob field names are camelCase and load-bearing: renaming one breaks every
existing save. Legacy names written by older clients are accepted on load
(`time` for elapsedSeconds, `rank` for a card's value, `gamesCompleted`
for gamesPlayed, `largeCards` for cardSize) but never written.

Loading normalizes: missing or null fields take their defaults. A game
blob must then describe a structurally valid layout (check_invariants), or
it is rejected as corrupt.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from solitaire.logic.cards import ACE, KING, Card
from solitaire.logic.enums import CardSize, Suit
from solitaire.logic.rng import validate_seed_hex
from solitaire.logic.settings import DEFAULT_DRAW_COUNT, Preferences
from solitaire.logic.state import NUM_FOUNDATIONS, NUM_TABLEAU, GameState, check_invariants
from solitaire.logic.stats import Stats

SAVE_FORMAT_VERSION = 1

_BLOB_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def _none_to_default(value: object, default: object) -> object:
    return default if value is None else value


class CardBlob(BaseModel):
    model_config = _BLOB_CONFIG

    suit: Suit
    rank: int = Field(ge=ACE, le=KING, validation_alias=AliasChoices("value", "rank"), serialization_alias="value")
    face_up: bool = False

    @classmethod
    def from_card(cls, card: Card) -> CardBlob:
        return cls(suit=card.suit, rank=card.rank, face_up=card.face_up)

    def to_card(self) -> Card:
        return Card(suit=self.suit, rank=self.rank, face_up=self.face_up)


def _to_pile(blobs: list[CardBlob]) -> tuple[Card, ...]:
    return tuple(blob.to_card() for blob in blobs)


def _from_pile(pile: tuple[Card, ...]) -> list[CardBlob]:
    return [CardBlob.from_card(card) for card in pile]


class SavedGame(BaseModel):
    """Blob stored under the game key."""

    model_config = _BLOB_CONFIG

    stock: list[CardBlob] = Field(default_factory=list)
    waste: list[CardBlob] = Field(default_factory=list)
    tableau: list[list[CardBlob]] = Field(default_factory=lambda: [[] for _ in range(NUM_TABLEAU)])
    foundations: list[list[CardBlob]] = Field(default_factory=lambda: [[] for _ in range(NUM_FOUNDATIONS)])
    score: int = 0
    moves: int = Field(default=0, ge=0)
    elapsed_seconds: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("elapsedSeconds", "time"),
        serialization_alias="elapsedSeconds",
    )
    draw_count: int = DEFAULT_DRAW_COUNT
    seed: str = ""
    version: int = SAVE_FORMAT_VERSION

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:  # noqa: ANN401
        # null behaves like a missing field
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @field_validator("draw_count", mode="before")
    @classmethod
    def _falsy_draw_count(cls, v: object) -> object:
        return v or DEFAULT_DRAW_COUNT

    @field_validator("seed")
    @classmethod
    def _valid_seed(cls, v: str) -> str:
        # empty for hand-built states, which cannot be restarted
        if v:
            validate_seed_hex(v)
        return v

    @classmethod
    def from_state(cls, state: GameState) -> SavedGame:
        return cls(
            stock=_from_pile(state.stock),
            waste=_from_pile(state.waste),
            tableau=[_from_pile(pile) for pile in state.tableau],
            foundations=[_from_pile(pile) for pile in state.foundations],
            score=state.score,
            moves=state.moves,
            elapsed_seconds=state.elapsed_seconds,
            draw_count=state.draw_count,
            seed=state.seed,
        )

    def to_state(self) -> GameState:
        """Build and verify a GameState.

        Raises ValueError for a malformed shape and InvariantViolationError
        for a layout that does not hold exactly one valid deck.
        """
        state = GameState(
            stock=_to_pile(self.stock),
            waste=_to_pile(self.waste),
            tableau=tuple(_to_pile(pile) for pile in self.tableau),
            foundations=tuple(_to_pile(pile) for pile in self.foundations),
            score=self.score,
            moves=self.moves,
            elapsed_seconds=self.elapsed_seconds,
            draw_count=self.draw_count,
            seed=self.seed,
        )
        check_invariants(state)
        return state


class SavedStats(BaseModel):
    """Blob stored under the stats key."""

    model_config = _BLOB_CONFIG

    games_played: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("gamesPlayed", "gamesCompleted"),
        serialization_alias="gamesPlayed",
    )
    games_won: int = Field(default=0, ge=0)
    current_streak: int = Field(default=0, ge=0)
    best_streak: int = Field(default=0, ge=0)
    best_score: int = 0
    best_moves: int = Field(default=0, ge=0)
    best_time: int = Field(default=0, ge=0)
    total_time: int = Field(default=0, ge=0)

    @field_validator("*", mode="before")
    @classmethod
    def _null_is_zero(cls, v: object) -> object:
        return _none_to_default(v, 0)

    @classmethod
    def from_stats(cls, stats: Stats) -> SavedStats:
        return cls(**stats.model_dump())

    def to_stats(self) -> Stats:
        return Stats(**self.model_dump())


class SavedSettings(BaseModel):
    """Blob stored under the settings key."""

    model_config = _BLOB_CONFIG

    draw_count: int = DEFAULT_DRAW_COUNT
    sound: bool = True
    animations: bool = True
    card_size: CardSize = CardSize.NORMAL

    @model_validator(mode="before")
    @classmethod
    def _legacy_large_cards(cls, data: Any) -> Any:  # noqa: ANN401
        if isinstance(data, dict) and "largeCards" in data and "cardSize" not in data:
            data = {**data, "cardSize": CardSize.LARGE if data["largeCards"] else CardSize.NORMAL}
        return data

    @classmethod
    def from_preferences(cls, preferences: Preferences) -> SavedSettings:
        return cls(**preferences.model_dump())

    def to_preferences(self) -> Preferences:
        return Preferences(**self.model_dump())
