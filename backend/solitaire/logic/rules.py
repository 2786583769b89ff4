"""
Klondike legality predicates.

Foundation acceptance is same-suit ascending from Ace; tableau acceptance is
alternating-color descending onto a face-up card, King onto an empty pile.
Every move operation is expressed in terms of these two predicates plus
positional checks.
"""

from collections.abc import Sequence

from solitaire.logic.cards import ACE, KING, Card


def is_valid_foundation_move(card: Card, top: Card | None) -> bool:
    """Card may go onto a foundation whose top is `top` (None when empty)."""
    if top is None:
        return card.rank == ACE
    return card.suit == top.suit and card.rank == top.rank + 1


def is_valid_tableau_move(card: Card, top: Card | None) -> bool:
    """Card may go onto a tableau pile whose top is `top` (None when empty)."""
    if top is None:
        return card.rank == KING
    return card.color != top.color and card.rank == top.rank - 1


def is_valid_run(cards: Sequence[Card]) -> bool:
    """All face-up, each card alternating color and one rank below the card under it."""
    if not cards or not all(card.face_up for card in cards):
        return False
    return all(
        upper.color != lower.color and upper.rank == lower.rank - 1
        for lower, upper in zip(cards, cards[1:], strict=False)
    )


def can_accept_on_tableau(card: Card, pile: Sequence[Card]) -> bool:
    """Tableau drop check including the face-down-top guard."""
    if not pile:
        return is_valid_tableau_move(card, None)
    top = pile[-1]
    return top.face_up and is_valid_tableau_move(card, top)


def can_accept_on_foundation(card: Card, pile: Sequence[Card]) -> bool:
    return is_valid_foundation_move(card, pile[-1] if pile else None)


def movable_run_start(pile: Sequence[Card], index: int) -> tuple[Card, ...] | None:
    """Return the run pile[index:] if it can be picked up as one unit, else None."""
    if not 0 <= index < len(pile):
        return None
    run = tuple(pile[index:])
    return run if is_valid_run(run) else None
