from abc import ABC, abstractmethod
from typing import Hashable, Iterator, Optional, TypeVar

from core.outcome import Outcome

Action = TypeVar('Action')
InformationSet = Hashable
Player = Hashable


class GameState(ABC):
    """
    Abstract node of a finite extensive-form game.

    A concrete game implements this interface; the solver only ever calls
    these six methods. Successors are produced on demand by advance() and
    are never retained by the solver.
    """

    def is_terminal(self) -> bool:
        """A state is terminal iff player() returns None."""
        return self.player() is None

    @abstractmethod
    def advance(self, action: Action) -> "GameState":
        """
        Return the successor reached by playing action.

        Must raise core.errors.MissingSuccessor on a terminal state or for an
        action outside actions().
        """
        pass

    @abstractmethod
    def actions(self) -> Iterator[Action]:
        """
        Actions available at this node. A(h) in the literature.

        Consumed once per visit. Every node of an information set must
        yield the same actions in the same order.
        """
        pass

    @abstractmethod
    def information_set(self) -> InformationSet:
        """Information set this node is partitioned in. h -> I."""
        pass

    @abstractmethod
    def player(self) -> Optional[Player]:
        """Player to act, P(h). Only terminal states return None."""
        pass

    @abstractmethod
    def outcome(self) -> Outcome:
        """Utilities at this node. Must be defined for terminal states."""
        pass
