"""Typed domain exceptions for Klondike rule violations.

Pure transition functions (moves.py, deck.py) raise subclasses of
GameRuleError. SolitaireEngine catches them at its boundary and converts
them to False/None results, so callers never see a rule violation raised.
"""


class GameRuleError(Exception):
    """Base exception for game rule violations."""


class InvalidMoveError(GameRuleError):
    """Move is not legal in the current state (bad index, empty source, predicate failure)."""


class EmptyStockError(InvalidMoveError):
    """Draw requested with both stock and waste empty."""


class UnsupportedSettingsError(GameRuleError):
    """Game settings contain values the engine cannot honor."""


class InvariantViolationError(AssertionError):
    """Raised when a state breaks a structural invariant (card conservation, foundation order).

    Indicates a programming defect, not a player mistake. Never caught by the engine.
    """
