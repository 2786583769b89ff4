"""
Hint search and auto-complete eligibility.

find_hint scans in a fixed priority order and returns the first legal move:
1. waste top -> foundation 0..3
2. waste top -> tableau 0..6
3. tableau tops 0..6 -> foundation 0..3
4. face-up runs: source 0..6, deepest face-up card first, target 0..6 (not self)
5. draw from stock, when stock or waste has cards
"""

from solitaire.logic.enums import HintType
from solitaire.logic.rules import can_accept_on_foundation, can_accept_on_tableau, movable_run_start
from solitaire.logic.state import NUM_FOUNDATIONS, NUM_TABLEAU, GameState
from solitaire.logic.types import Hint


def _waste_hint(state: GameState) -> Hint | None:
    if not state.waste:
        return None
    card = state.waste[-1]
    for i in range(NUM_FOUNDATIONS):
        if can_accept_on_foundation(card, state.foundations[i]):
            return Hint(type=HintType.WASTE_TO_FOUNDATION, target=i)
    for i in range(NUM_TABLEAU):
        if can_accept_on_tableau(card, state.tableau[i]):
            return Hint(type=HintType.WASTE_TO_TABLEAU, target=i)
    return None


def _tableau_to_foundation_hint(state: GameState) -> Hint | None:
    for source, pile in enumerate(state.tableau):
        if not pile or not pile[-1].face_up:
            continue
        for target in range(NUM_FOUNDATIONS):
            if can_accept_on_foundation(pile[-1], state.foundations[target]):
                return Hint(type=HintType.TABLEAU_TO_FOUNDATION, source=source, target=target)
    return None


def _tableau_to_tableau_hint(state: GameState) -> Hint | None:
    for source, pile in enumerate(state.tableau):
        for card_index, card in enumerate(pile):
            if movable_run_start(pile, card_index) is None:
                continue
            for target in range(NUM_TABLEAU):
                if target == source or (card_index == 0 and not state.tableau[target]):
                    # a whole pile onto an empty pile changes nothing
                    continue
                if can_accept_on_tableau(card, state.tableau[target]):
                    return Hint(
                        type=HintType.TABLEAU_TO_TABLEAU,
                        source=source,
                        card_index=card_index,
                        target=target,
                    )
    return None


def find_hint(state: GameState) -> Hint | None:
    """Return the first legal move in priority order, or None on full deadlock."""
    hint = _waste_hint(state) or _tableau_to_foundation_hint(state) or _tableau_to_tableau_hint(state)
    if hint is not None:
        return hint
    if state.stock or state.waste:
        return Hint(type=HintType.DRAW_STOCK)
    return None


def can_auto_complete(state: GameState) -> bool:
    """No hidden information remains: stock and waste empty, every tableau card face-up."""
    if state.stock or state.waste:
        return False
    return all(card.face_up for pile in state.tableau for card in pile)
