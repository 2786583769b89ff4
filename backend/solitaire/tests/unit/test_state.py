"""Tests for GameState shape validation, win detection and structural invariants."""

import pytest
from pydantic import ValidationError

from solitaire.logic.cards import ACE, KING
from solitaire.logic.enums import Suit
from solitaire.logic.exceptions import InvariantViolationError
from solitaire.logic.state import GameState, check_invariants, is_won
from solitaire.tests.helpers import almost_won_state, card, down, make_state, solved_state


class TestGameStateShape:
    def test_defaults_are_empty(self):
        state = GameState()

        assert len(state.foundations) == 4
        assert len(state.tableau) == 7
        assert state.all_cards() == []

    def test_is_frozen(self):
        state = GameState()
        with pytest.raises(ValidationError):
            state.score = 10  # type: ignore[misc]

    def test_wrong_pile_count_rejected(self):
        with pytest.raises(ValidationError, match="tableau"):
            GameState(tableau=((),) * 6)

    def test_unsupported_draw_count_rejected(self):
        with pytest.raises(ValidationError, match="draw_count"):
            GameState(draw_count=2)

    def test_negative_moves_rejected(self):
        with pytest.raises(ValidationError):
            GameState(moves=-1)


class TestIsWon:
    def test_full_foundations(self):
        state = solved_state()
        assert is_won(state)
        assert state.foundation_count() == 52

    def test_one_king_short(self):
        assert not is_won(almost_won_state())


class TestCheckInvariants:
    def test_full_deck_passes(self):
        check_invariants(make_state())
        check_invariants(solved_state())

    def test_missing_card(self):
        with pytest.raises(InvariantViolationError, match="Expected 52 cards"):
            check_invariants(make_state(fill_stock=False))

    def test_duplicate_card(self):
        state = make_state(tableau=[[card(KING, Suit.CLUBS)]])
        duplicated = state.model_copy(update={"waste": (card(KING, Suit.CLUBS),), "stock": state.stock[1:]})
        with pytest.raises(InvariantViolationError, match="Duplicate"):
            check_invariants(duplicated)

    def test_foundation_out_of_order(self):
        state = make_state(foundations=[[card(ACE, Suit.HEARTS), card(3, Suit.HEARTS)]])
        with pytest.raises(InvariantViolationError, match="Foundation 0"):
            check_invariants(state)

    def test_foundation_mixed_suits(self):
        state = make_state(foundations=[[card(ACE, Suit.HEARTS), card(2, Suit.CLUBS)]])
        with pytest.raises(InvariantViolationError, match="Foundation 0"):
            check_invariants(state)

    def test_face_up_stock_card(self):
        state = make_state(stock=[card(5, Suit.CLUBS)])
        with pytest.raises(InvariantViolationError, match="Stock"):
            check_invariants(state)

    def test_face_down_waste_card(self):
        state = make_state(waste=[down(5, Suit.CLUBS)])
        with pytest.raises(InvariantViolationError, match="Waste"):
            check_invariants(state)

    def test_face_down_tableau_top(self):
        state = make_state(tableau=[[], [down(5, Suit.CLUBS)]])
        with pytest.raises(InvariantViolationError, match="Tableau 1"):
            check_invariants(state)

    def test_violation_is_an_assertion(self):
        """Invariant failures are defects: they must never be caught as rule errors."""
        assert issubclass(InvariantViolationError, AssertionError)
