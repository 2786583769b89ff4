"""
Deck construction, shuffling and the initial Klondike deal.

Deal layout (7 tableau piles, 0-indexed):
  pile k receives k+1 cards, filled one pile at a time from the end of
  the deck, so pile 0 takes the last card and pile 6 takes cards 22..28
  from the end. The last card each pile receives lands face-up.
  The remaining 24 cards become the stock in deck order, face-down, top = last.
"""

from solitaire.logic.cards import DECK_SIZE, KING, Card
from solitaire.logic.enums import Suit
from solitaire.logic.rng import PCG64DXSM, derive_deck_rng, fisher_yates_shuffle
from solitaire.logic.settings import DEFAULT_DRAW_COUNT
from solitaire.logic.state import NUM_TABLEAU, GameState

TABLEAU_DEAL_SIZE = NUM_TABLEAU * (NUM_TABLEAU + 1) // 2  # 28
STOCK_DEAL_SIZE = DECK_SIZE - TABLEAU_DEAL_SIZE  # 24


def create_deck() -> list[Card]:
    """Create the 52 canonical cards, face-down, suit-major and rank-ascending."""
    return [Card(suit=suit, rank=rank) for suit in Suit for rank in range(1, KING + 1)]


def shuffle_deck(deck: list[Card], pcg: PCG64DXSM) -> list[Card]:
    """Return a uniformly shuffled copy of the deck."""
    return fisher_yates_shuffle(deck, pcg)


def shuffled_deck(seed: str) -> list[Card]:
    """Create and shuffle a deck deterministically from a seed."""
    return shuffle_deck(create_deck(), derive_deck_rng(seed))


def deal(deck: list[Card], *, draw_count: int = DEFAULT_DRAW_COUNT, seed: str = "") -> GameState:
    """
    Deal a fresh game from a deck in the given order.

    Consumes the whole deck exactly once. Returns a GameState with empty
    foundations and waste and zeroed counters.
    """
    if len(deck) != DECK_SIZE:
        raise ValueError(f"Expected {DECK_SIZE} cards, got {len(deck)}")
    if len({card.identity for card in deck}) != DECK_SIZE:
        raise ValueError("All cards must be unique (full deck)")

    remaining = list(deck)
    piles = [[remaining.pop().turned(face_up=row == col) for row in range(col + 1)] for col in range(NUM_TABLEAU)]

    stock = tuple(card.turned(face_up=False) for card in remaining)

    return GameState(
        stock=stock,
        tableau=tuple(tuple(pile) for pile in piles),
        draw_count=draw_count,
        seed=seed,
    )


def deal_from_seed(seed: str, *, draw_count: int = DEFAULT_DRAW_COUNT) -> GameState:
    """Shuffle a fresh deck from the seed and deal it."""
    return deal(shuffled_deck(seed), draw_count=draw_count, seed=seed)
