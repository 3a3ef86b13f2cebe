"""Contract violations between the solver and a game-state implementation."""

from typing import Any


class ContractViolation(ValueError):
    """
    Base class for every violation of the game-state contract.

    Attributes:
        state: The node at which the violation was detected
    """

    def __init__(self, message: str, state: Any = None):
        super().__init__(message)
        self.state = state


class MissingPlayer(ContractViolation):
    """A non-terminal node reports no acting player."""


class MissingSuccessor(ContractViolation):
    """advance() could not produce a successor for the given action."""


class EmptyActionSet(ContractViolation):
    """A non-terminal node offers no actions."""


class RootNotDecisionState(ContractViolation):
    """The supplied root is already terminal."""


class MissingUtility(ContractViolation):
    """An outcome has no utility entry for the requested player."""


class NonSingletonInformationSet(ContractViolation):
    """Two decision nodes share one information set (strict mode only)."""
