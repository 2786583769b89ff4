"""
String enum definitions for Klondike concepts.
"""

from enum import StrEnum


class Suit(StrEnum):
    """Card suits, in deck construction order."""

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"


class Color(StrEnum):
    RED = "red"
    BLACK = "black"


class HintType(StrEnum):
    """Kinds of moves suggested by the hint search."""

    WASTE_TO_FOUNDATION = "waste_to_foundation"
    WASTE_TO_TABLEAU = "waste_to_tableau"
    TABLEAU_TO_FOUNDATION = "tableau_to_foundation"
    TABLEAU_TO_TABLEAU = "tableau_to_tableau"
    DRAW_STOCK = "draw_stock"


class CardSize(StrEnum):
    """Card size preference for the presentation layer."""

    SMALL = "small"
    NORMAL = "normal"
    LARGE = "large"


_SUIT_COLORS: dict[Suit, Color] = {
    Suit.HEARTS: Color.RED,
    Suit.DIAMONDS: Color.RED,
    Suit.CLUBS: Color.BLACK,
    Suit.SPADES: Color.BLACK,
}


def suit_color(suit: Suit) -> Color:
    """Hearts and diamonds are red, clubs and spades are black."""
    return _SUIT_COLORS[suit]
