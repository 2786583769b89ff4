"""State builders shared by the solitaire unit tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared.storage import MemoryBlobStorage
from solitaire.logic.cards import ACE, KING, Card
from solitaire.logic.deck import create_deck
from solitaire.logic.engine import SolitaireEngine
from solitaire.logic.enums import Suit
from solitaire.logic.state import NUM_FOUNDATIONS, NUM_TABLEAU, GameState
from solitaire.persistence.repository import GameRepository

if TYPE_CHECKING:
    from collections.abc import Sequence

    from solitaire.logic.settings import GameSettings

# fixed 192-char seeds so deals are reproducible across test runs
SEED_A = "a1" * 96
SEED_B = "b2" * 96


def card(rank: int, suit: Suit, *, face_up: bool = True) -> Card:
    return Card(suit=suit, rank=rank, face_up=face_up)


def down(rank: int, suit: Suit) -> Card:
    return Card(suit=suit, rank=rank, face_up=False)


def foundation_run(suit: Suit, top_rank: int = KING) -> tuple[Card, ...]:
    """Face-up Ace..top_rank of one suit."""
    return tuple(card(rank, suit) for rank in range(ACE, top_rank + 1))


def make_state(
    *,
    stock: Sequence[Card] = (),
    waste: Sequence[Card] = (),
    foundations: Sequence[Sequence[Card]] | None = None,
    tableau: Sequence[Sequence[Card]] | None = None,
    fill_stock: bool = True,
    **counters: int,
) -> GameState:
    """
    Build a state from explicit piles.

    With fill_stock, every card not placed elsewhere goes under the given
    stock cards (face-down), so the result always holds the full deck.
    """
    foundations = [list(pile) for pile in (foundations or [])]
    foundations += [[] for _ in range(NUM_FOUNDATIONS - len(foundations))]
    tableau = [list(pile) for pile in (tableau or [])]
    tableau += [[] for _ in range(NUM_TABLEAU - len(tableau))]

    stock = list(stock)
    if fill_stock:
        placed = {c.identity for c in stock}
        placed.update(c.identity for c in waste)
        for pile in (*foundations, *tableau):
            placed.update(c.identity for c in pile)
        stock = [c for c in create_deck() if c.identity not in placed] + stock

    return GameState(
        stock=tuple(stock),
        waste=tuple(waste),
        foundations=tuple(tuple(pile) for pile in foundations),
        tableau=tuple(tuple(pile) for pile in tableau),
        **counters,
    )


def solved_state(**counters: int) -> GameState:
    return make_state(foundations=[foundation_run(suit) for suit in Suit], fill_stock=False, **counters)


def almost_won_state(**counters: int) -> GameState:
    """Every suit up to Queen on the foundations; the four Kings alone on tableau 0..3."""
    suits = list(Suit)
    return make_state(
        foundations=[foundation_run(suit, KING - 1) for suit in suits],
        tableau=[[card(KING, suit)] for suit in suits],
        fill_stock=False,
        **counters,
    )


def engine_with_state(
    state: GameState,
    *,
    store: MemoryBlobStorage | None = None,
    settings: GameSettings | None = None,
) -> SolitaireEngine:
    """An engine that resumed `state` from storage, as after an app restart."""
    store = store if store is not None else MemoryBlobStorage()
    repository = GameRepository(store)
    repository.save_game(state)
    engine = SolitaireEngine(repository, settings=settings)
    assert engine.load()
    return engine
