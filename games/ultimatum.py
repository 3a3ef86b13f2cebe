from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from core.errors import MissingSuccessor
from core.outcome import Outcome
from games.base import GameState


PROPOSER = "proposer"
RESPONDER = "responder"


@dataclass(frozen=True)
class UltimatumState(GameState):
    """
    Two-stage ultimatum game.

    Rules:
    - The proposer offers a Fair or an Unfair split
    - The responder sees the offer and accepts or rejects it
    - Rejection leaves both players with nothing

    Attributes:
        history: Actions taken so far, e.g. ("Unfair", "Accept")
    """
    history: Tuple[str, ...] = ()

    FAIR = "Fair"
    UNFAIR = "Unfair"
    ACCEPT = "Accept"
    REJECT = "Reject"

    # (proposer, responder) utilities per terminal history
    PAYOFFS = {
        ("Fair", "Accept"): (5.0, 5.0),
        ("Fair", "Reject"): (0.0, 0.0),
        ("Unfair", "Accept"): (8.0, 2.0),
        ("Unfair", "Reject"): (0.0, 0.0),
    }

    def player(self) -> Optional[str]:
        if len(self.history) == 0:
            return PROPOSER
        if len(self.history) == 1:
            return RESPONDER
        return None

    def actions(self) -> Iterator[str]:
        if len(self.history) == 0:
            yield from (self.FAIR, self.UNFAIR)
        elif len(self.history) == 1:
            yield from (self.ACCEPT, self.REJECT)

    def advance(self, action: str) -> "UltimatumState":
        if self.is_terminal():
            raise MissingSuccessor(f"Cannot advance terminal state: {self}", self)
        if action not in tuple(self.actions()):
            raise MissingSuccessor(f"Illegal action {action!r} at {self}", self)
        return UltimatumState(history=self.history + (action,))

    def information_set(self) -> str:
        """
        "initial" for the proposer, "after <offer>" for the responder.

        The responder observes the offer, so every information set is a
        singleton.
        """
        if not self.history:
            return "initial"
        return f"after {self.history[0]}"

    def outcome(self) -> Outcome:
        if not self.is_terminal():
            raise ValueError(f"Cannot get outcome of non-terminal state: {self}")
        proposer, responder = self.PAYOFFS[self.history]
        return Outcome({PROPOSER: proposer, RESPONDER: responder})
