"""
Game state model for Klondike.

GameState is frozen: every transition returns a new instance, so a snapshot
for undo is simply a reference to the previous state.
"""

from __future__ import annotations

from collections import Counter
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from solitaire.logic.cards import ACE, DECK_SIZE, NUM_RANKS, Card
from solitaire.logic.exceptions import InvariantViolationError
from solitaire.logic.settings import DEFAULT_DRAW_COUNT, SUPPORTED_DRAW_COUNTS

NUM_FOUNDATIONS = 4
NUM_TABLEAU = 7

Pile = tuple[Card, ...]


def _empty_piles(count: int) -> tuple[Pile, ...]:
    return tuple(() for _ in range(count))


class GameState(BaseModel):
    """Immutable snapshot of every pile plus score, move and time counters."""

    model_config = ConfigDict(frozen=True)

    stock: Pile = ()  # face-down, top = last
    waste: Pile = ()  # face-up, top = most recently drawn
    foundations: tuple[Pile, ...] = Field(default_factory=lambda: _empty_piles(NUM_FOUNDATIONS))
    tableau: tuple[Pile, ...] = Field(default_factory=lambda: _empty_piles(NUM_TABLEAU))

    score: int = 0
    moves: int = Field(default=0, ge=0)
    elapsed_seconds: int = Field(default=0, ge=0)
    draw_count: int = DEFAULT_DRAW_COUNT

    seed: str = ""  # deal seed; empty for hand-built states

    @model_validator(mode="after")
    def _validate_shape(self) -> Self:
        if len(self.foundations) != NUM_FOUNDATIONS:
            raise ValueError(f"Expected {NUM_FOUNDATIONS} foundations, got {len(self.foundations)}")
        if len(self.tableau) != NUM_TABLEAU:
            raise ValueError(f"Expected {NUM_TABLEAU} tableau piles, got {len(self.tableau)}")
        if self.draw_count not in SUPPORTED_DRAW_COUNTS:
            raise ValueError(f"draw_count must be one of {SUPPORTED_DRAW_COUNTS}, got {self.draw_count}")
        return self

    def all_cards(self) -> list[Card]:
        """Every card in the layout: stock, waste, foundations, then tableau."""
        cards = [*self.stock, *self.waste]
        for pile in self.foundations:
            cards.extend(pile)
        for pile in self.tableau:
            cards.extend(pile)
        return cards

    def foundation_count(self) -> int:
        return sum(len(pile) for pile in self.foundations)


def is_won(state: GameState) -> bool:
    """All four foundations hold a full suit."""
    return all(len(pile) == NUM_RANKS for pile in state.foundations)


def check_invariants(state: GameState) -> None:
    """
    Verify structural invariants of a state.

    - Exactly 52 cards with 52 distinct (suit, rank) identities.
    - Every foundation is a single-suit run Ace..n.
    - Stock cards are face-down, waste and foundation cards are face-up.
    - The top card of every non-empty tableau pile is face-up.

    Raises InvariantViolationError on the first violation found.
    """
    cards = state.all_cards()
    if len(cards) != DECK_SIZE:
        raise InvariantViolationError(f"Expected {DECK_SIZE} cards, found {len(cards)}")
    duplicates = [identity for identity, n in Counter(c.identity for c in cards).items() if n > 1]
    if duplicates:
        raise InvariantViolationError(f"Duplicate cards: {duplicates}")

    for index, pile in enumerate(state.foundations):
        for position, card in enumerate(pile):
            if card.rank != ACE + position or card.suit != pile[0].suit or not card.face_up:
                raise InvariantViolationError(f"Foundation {index} out of order at position {position}")

    if any(card.face_up for card in state.stock):
        raise InvariantViolationError("Stock contains a face-up card")
    if not all(card.face_up for card in state.waste):
        raise InvariantViolationError("Waste contains a face-down card")
    for index, pile in enumerate(state.tableau):
        if pile and not pile[-1].face_up:
            raise InvariantViolationError(f"Tableau {index} has a face-down top card")
