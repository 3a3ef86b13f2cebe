from dataclasses import dataclass
from typing import Iterator, Optional

from core.errors import MissingSuccessor
from core.outcome import Outcome
from games.base import GameState


@dataclass(frozen=True)
class CentipedeState(GameState):
    """
    Centipede game with linearly growing piles.

    Rules:
    - Players 0 and 1 alternate, player 0 moves first
    - At stage k the piles hold 4 + 2k and 1 + 2k chips
    - "take" ends the game: the mover gets the large pile, the opponent the small one
    - "pass" adds two chips to each pile and hands the move to the opponent
    - After `rounds` passes the game ends and the player who would move next
      gets the large pile

    Attributes:
        rounds: Number of decision stages
        stage: Passes made so far
        taken: Whether the last mover took the piles
    """
    rounds: int
    stage: int = 0
    taken: bool = False

    TAKE = "take"
    PASS = "pass"

    def player(self) -> Optional[int]:
        if self.taken or self.stage >= self.rounds:
            return None
        return self.stage % 2

    def actions(self) -> Iterator[str]:
        if not self.is_terminal():
            yield self.TAKE
            yield self.PASS

    def advance(self, action: str) -> "CentipedeState":
        if self.is_terminal():
            raise MissingSuccessor(f"Cannot advance terminal state: {self}", self)
        if action == self.TAKE:
            return CentipedeState(rounds=self.rounds, stage=self.stage, taken=True)
        if action == self.PASS:
            return CentipedeState(rounds=self.rounds, stage=self.stage + 1)
        raise MissingSuccessor(f"Illegal action {action!r} at {self}", self)

    def information_set(self) -> int:
        # Perfect information: the stage identifies the node
        return self.stage

    def outcome(self) -> Outcome:
        if not self.is_terminal():
            raise ValueError(f"Cannot get outcome of non-terminal state: {self}")
        large = 4.0 + 2 * self.stage
        small = 1.0 + 2 * self.stage
        winner = self.stage % 2
        return Outcome({winner: large, 1 - winner: small})
