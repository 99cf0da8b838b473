"""Exceptions raised by the risk engine."""


class FoodGuardError(Exception):
    """Base error for the food guard engine."""


class InvalidEvaluationInputError(FoodGuardError, ValueError):
    """Raised when a food or profile cannot be evaluated safely."""


class CollaboratorUnavailableError(FoodGuardError):
    """Raised when an external collaborator cannot be reached."""

    def __init__(self, collaborator: str, reason: str) -> None:
        super().__init__(f"{collaborator} unavailable: {reason}")
        self.collaborator = collaborator
        self.reason = reason


class RiskInvariantError(FoodGuardError):
    """Raised when a detector builds a risk without a required field."""
