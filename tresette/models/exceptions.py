"""Error hierarchy for logic defects in the game core.

Rejected proposals (illegal plays, unauthorized signs) never raise; they
return ``False``/``None``. The exceptions below signal broken invariants.
"""


class TresetteError(Exception):
    """Base class for game core errors."""


class InvariantViolationError(TresetteError, RuntimeError):
    """Raised when an internal invariant does not hold (logic defect)."""


class EmptyDeckError(InvariantViolationError):
    """Raised when drawing from an empty deck."""


class HandFullError(InvariantViolationError):
    """Raised when adding a card to a hand that already holds ten cards."""


class TeamAssignmentError(InvariantViolationError):
    """Raised when a player is moved to a second team."""


class DealStateError(InvariantViolationError):
    """Raised when a deal lifecycle method is called in the wrong state."""


class SignNotAllowedError(TresetteError, ValueError):
    """Raised when a sign is sent without authorization."""


class PlayerNotFoundError(TresetteError, LookupError):
    """Raised when an operation names a player id that is not seated."""
