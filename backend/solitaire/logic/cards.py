"""
Card model and card constants.

A card's identity is its (suit, rank) pair. Cards are frozen: flipping a card
produces a new Card with the same identity, so moving or flipping never
creates or destroys an identity.
"""

from pydantic import BaseModel, ConfigDict, Field

from solitaire.logic.enums import Color, Suit, suit_color

ACE = 1
JACK = 11
QUEEN = 12
KING = 13
NUM_RANKS = 13
NUM_SUITS = 4
DECK_SIZE = NUM_SUITS * NUM_RANKS  # 52

_RANK_LABELS = {ACE: "A", JACK: "J", QUEEN: "Q", KING: "K"}
_SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}


class Card(BaseModel):
    """Immutable playing card with its facing."""

    model_config = ConfigDict(frozen=True)

    suit: Suit
    rank: int = Field(ge=ACE, le=KING)
    face_up: bool = False

    @property
    def color(self) -> Color:
        return suit_color(self.suit)

    @property
    def identity(self) -> tuple[Suit, int]:
        return (self.suit, self.rank)

    @property
    def label(self) -> str:
        """Short human-readable label, e.g. 'Q♥' or '10♣'."""
        return f"{_RANK_LABELS.get(self.rank, str(self.rank))}{_SUIT_SYMBOLS[self.suit]}"

    def turned(self, *, face_up: bool) -> "Card":
        """Return this card with the requested facing (self when unchanged)."""
        if self.face_up == face_up:
            return self
        return self.model_copy(update={"face_up": face_up})


def top_card(pile: tuple[Card, ...]) -> Card | None:
    """Return the top (last) card of a pile, or None when empty."""
    return pile[-1] if pile else None
