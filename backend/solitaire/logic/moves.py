"""
Pure move transitions for Klondike.

Every function takes a frozen GameState and returns a new GameState with the
move applied, `moves` incremented and the score delta added. Invalid moves
raise InvalidMoveError before anything is built, so a failed move never
yields a partial state.
"""

from solitaire.logic.cards import Card
from solitaire.logic.exceptions import EmptyStockError, InvalidMoveError
from solitaire.logic.rules import can_accept_on_foundation, can_accept_on_tableau, movable_run_start
from solitaire.logic.settings import GameSettings
from solitaire.logic.state import NUM_FOUNDATIONS, NUM_TABLEAU, GameState, Pile

_DEFAULT_SETTINGS = GameSettings()


def _check_index(index: int, count: int, kind: str) -> None:
    if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < count:
        raise InvalidMoveError(f"Invalid {kind} index {index!r}, expected 0-{count - 1}")


def _replace(piles: tuple[Pile, ...], index: int, pile: Pile) -> tuple[Pile, ...]:
    updated = list(piles)
    updated[index] = pile
    return tuple(updated)


def _expose_top(pile: Pile) -> tuple[Pile, bool]:
    """Flip the new top of a tableau pile if it is face-down. Returns (pile, flipped)."""
    if pile and not pile[-1].face_up:
        return (*pile[:-1], pile[-1].turned(face_up=True)), True
    return pile, False


def _commit(state: GameState, score_delta: int, **updates: object) -> GameState:
    return state.model_copy(
        update={
            **updates,
            "score": state.score + score_delta,
            "moves": state.moves + 1,
        }
    )


def _waste_top(state: GameState) -> Card:
    if not state.waste:
        raise InvalidMoveError("Waste is empty")
    return state.waste[-1]


def draw_from_stock(state: GameState) -> GameState:
    """
    Draw up to draw_count cards from stock to waste, face-up.

    When the stock is empty, recycle the waste back into the stock
    (reversed, face-down). Both count as one move and score nothing.
    """
    if state.stock:
        n = min(state.draw_count, len(state.stock))
        stock = list(state.stock)
        drawn = [stock.pop().turned(face_up=True) for _ in range(n)]
        return _commit(state, 0, stock=tuple(stock), waste=(*state.waste, *drawn))

    if not state.waste:
        raise EmptyStockError("Stock and waste are both empty")

    recycled = tuple(card.turned(face_up=False) for card in reversed(state.waste))
    return _commit(state, 0, stock=recycled, waste=())


def waste_to_foundation(
    state: GameState, foundation_index: int, settings: GameSettings = _DEFAULT_SETTINGS
) -> GameState:
    _check_index(foundation_index, NUM_FOUNDATIONS, "foundation")
    card = _waste_top(state)
    target = state.foundations[foundation_index]
    if not can_accept_on_foundation(card, target):
        raise InvalidMoveError(f"{card.label} cannot go to foundation {foundation_index}")
    return _commit(
        state,
        settings.waste_to_foundation_points,
        waste=state.waste[:-1],
        foundations=_replace(state.foundations, foundation_index, (*target, card)),
    )


def waste_to_tableau(state: GameState, tableau_index: int, settings: GameSettings = _DEFAULT_SETTINGS) -> GameState:
    _check_index(tableau_index, NUM_TABLEAU, "tableau")
    card = _waste_top(state)
    target = state.tableau[tableau_index]
    if not can_accept_on_tableau(card, target):
        raise InvalidMoveError(f"{card.label} cannot go to tableau {tableau_index}")
    return _commit(
        state,
        settings.waste_to_tableau_points,
        waste=state.waste[:-1],
        tableau=_replace(state.tableau, tableau_index, (*target, card)),
    )


def tableau_to_foundation(
    state: GameState,
    tableau_index: int,
    foundation_index: int,
    settings: GameSettings = _DEFAULT_SETTINGS,
) -> GameState:
    """Move a tableau top card to a foundation, flipping the newly exposed card."""
    _check_index(tableau_index, NUM_TABLEAU, "tableau")
    _check_index(foundation_index, NUM_FOUNDATIONS, "foundation")
    source = state.tableau[tableau_index]
    if not source:
        raise InvalidMoveError(f"Tableau {tableau_index} is empty")
    card = source[-1]
    if not card.face_up:
        raise InvalidMoveError(f"Top of tableau {tableau_index} is face-down")
    target = state.foundations[foundation_index]
    if not can_accept_on_foundation(card, target):
        raise InvalidMoveError(f"{card.label} cannot go to foundation {foundation_index}")

    remaining, flipped = _expose_top(source[:-1])
    delta = settings.tableau_to_foundation_points + (settings.reveal_card_points if flipped else 0)
    return _commit(
        state,
        delta,
        tableau=_replace(state.tableau, tableau_index, remaining),
        foundations=_replace(state.foundations, foundation_index, (*target, card)),
    )


def tableau_to_tableau(
    state: GameState,
    source_index: int,
    card_index: int,
    target_index: int,
    settings: GameSettings = _DEFAULT_SETTINGS,
) -> GameState:
    """
    Move the run starting at card_index from one tableau pile onto another.

    The run must be face-up and in alternating-color descending sequence, and
    its bottom card must be accepted by the target pile.
    """
    _check_index(source_index, NUM_TABLEAU, "tableau")
    _check_index(target_index, NUM_TABLEAU, "tableau")
    if source_index == target_index:
        raise InvalidMoveError("Source and target tableau are the same pile")
    source = state.tableau[source_index]
    if not source:
        raise InvalidMoveError(f"Tableau {source_index} is empty")
    _check_index(card_index, len(source), "card")

    if not source[card_index].face_up:
        raise InvalidMoveError(f"Card {card_index} of tableau {source_index} is face-down")
    run = movable_run_start(source, card_index)
    if run is None:
        raise InvalidMoveError(f"Cards from {card_index} in tableau {source_index} are not a movable run")
    target = state.tableau[target_index]
    if not can_accept_on_tableau(run[0], target):
        raise InvalidMoveError(f"{run[0].label} cannot go to tableau {target_index}")

    remaining, flipped = _expose_top(source[:card_index])
    tableau = _replace(state.tableau, source_index, remaining)
    tableau = _replace(tableau, target_index, (*target, *run))
    return _commit(state, settings.reveal_card_points if flipped else 0, tableau=tableau)


def foundation_to_tableau(
    state: GameState,
    foundation_index: int,
    tableau_index: int,
    settings: GameSettings = _DEFAULT_SETTINGS,
) -> GameState:
    """Pull a foundation top card back onto the tableau (scored as a penalty)."""
    if not settings.allow_foundation_to_tableau:
        raise InvalidMoveError("Moving cards off the foundations is disabled")
    _check_index(foundation_index, NUM_FOUNDATIONS, "foundation")
    _check_index(tableau_index, NUM_TABLEAU, "tableau")
    source = state.foundations[foundation_index]
    if not source:
        raise InvalidMoveError(f"Foundation {foundation_index} is empty")
    card = source[-1]
    target = state.tableau[tableau_index]
    if not can_accept_on_tableau(card, target):
        raise InvalidMoveError(f"{card.label} cannot go to tableau {tableau_index}")
    return _commit(
        state,
        settings.foundation_to_tableau_points,
        foundations=_replace(state.foundations, foundation_index, source[:-1]),
        tableau=_replace(state.tableau, tableau_index, (*target, card)),
    )


def auto_move_to_foundation(state: GameState, settings: GameSettings = _DEFAULT_SETTINGS) -> GameState:
    """
    Play one card to a foundation: the waste top first, then tableau tops 0..6.

    Raises InvalidMoveError when no card can go up.
    """
    if state.waste:
        for foundation_index in range(NUM_FOUNDATIONS):
            if can_accept_on_foundation(state.waste[-1], state.foundations[foundation_index]):
                return waste_to_foundation(state, foundation_index, settings)

    for tableau_index, pile in enumerate(state.tableau):
        if not pile or not pile[-1].face_up:
            continue
        for foundation_index in range(NUM_FOUNDATIONS):
            if can_accept_on_foundation(pile[-1], state.foundations[foundation_index]):
                return tableau_to_foundation(state, tableau_index, foundation_index, settings)

    raise InvalidMoveError("No card can be moved to a foundation")
