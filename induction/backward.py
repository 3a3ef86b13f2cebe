import logging
from typing import Any, Iterator, List, Optional, Set, Tuple

from core.errors import (
    ContractViolation,
    EmptyActionSet,
    MissingPlayer,
    MissingSuccessor,
    NonSingletonInformationSet,
    RootNotDecisionState,
)
from core.outcome import Outcome
from core.profile import PureStrategyProfile
from games.base import GameState

logger = logging.getLogger(__name__)

METHODS = ("recursive", "iterative")


class _Frame:
    """Decision node awaiting the outcomes of its successors."""

    __slots__ = (
        "state", "player", "information_set", "actions",
        "best_utility", "best_outcome", "pending_action",
    )

    def __init__(self, state: GameState, player: Any, information_set: Any, actions: Iterator[Any]):
        self.state = state
        self.player = player
        self.information_set = information_set
        self.actions = actions
        self.best_utility: Optional[float] = None
        self.best_outcome: Optional[Outcome] = None
        self.pending_action: Any = None


class BackwardInduction:
    """
    Backward induction for finite perfect-information games.

    Walks the game tree once, depth first, resolving every decision node to
    the outcome of its best action for the acting player. The chosen action
    is written to the strategy profile as soon as it becomes the best one, so
    the finished profile is a subgame-perfect equilibrium when every
    information set is a singleton.

    Ties keep the first action in the order actions() yields them.
    """

    def __init__(
        self,
        method: str = "iterative",
        strict_information_sets: bool = False,
        progress=None,
    ):
        """
        Args:
            method: "recursive" or "iterative" (explicit work stack, no
                recursion depth limit)
            strict_information_sets: Raise NonSingletonInformationSet when two
                decision nodes share an information set
            progress: Optional tqdm bar, advanced once per visited node
        """
        if method not in METHODS:
            raise ValueError(f"Unknown method: {method}. Use 'recursive' or 'iterative'")
        self.method = method
        self.strict_information_sets = strict_information_sets
        self.progress = progress
        self.nodes_visited = 0
        self._seen_information_sets: Set[Any] = set()

    def solve(self, root: GameState) -> PureStrategyProfile:
        """Return one subgame-perfect equilibrium of the game rooted at root."""
        profile, _ = self.solve_with_outcome(root)
        return profile

    def solve_with_outcome(self, root: GameState) -> Tuple[PureStrategyProfile, Outcome]:
        """
        Solve and also return the outcome realized at the root.

        Raises:
            RootNotDecisionState: If root has no acting player
            ContractViolation: If any node breaks the game-state contract
        """
        if root.player() is None:
            raise RootNotDecisionState(f"Root is not a decision state: {root!r}", root)

        profile = PureStrategyProfile()

        if self.method == "recursive":
            outcome = self.evaluate(root, profile)
        else:
            outcome = self.evaluate_iterative(root, profile)

        logger.info(
            "Resolved %d nodes, %d information sets", self.nodes_visited, len(profile)
        )
        return profile, outcome

    def evaluate(self, state: GameState, profile: PureStrategyProfile) -> Outcome:
        """
        Recursively resolve state to its equilibrium outcome.

        Records the best action of every decision node below state in profile.
        Each call starts a fresh run: the visit count and the seen information
        sets are reset.
        """
        self._reset()
        return self._evaluate(state, profile)

    def _evaluate(self, state: GameState, profile: PureStrategyProfile) -> Outcome:
        self._visit()
        if state.is_terminal():
            return state.outcome()

        frame = self._open(state)
        for action in frame.actions:
            successor = self._advance(state, action)
            self._offer(frame, action, self._evaluate(successor, profile), profile)

        return self._close(frame)

    def evaluate_iterative(self, state: GameState, profile: PureStrategyProfile) -> Outcome:
        """
        Same traversal as evaluate(), driven by an explicit stack.

        Visits nodes and writes to profile in exactly the same order as the
        recursive form, and resets the same per-run state.
        """
        self._reset()
        self._visit()
        if state.is_terminal():
            return state.outcome()

        stack: List[_Frame] = [self._open(state)]
        while True:
            frame = stack[-1]
            action = next(frame.actions, _EXHAUSTED)

            if action is _EXHAUSTED:
                stack.pop()
                outcome = self._close(frame)
                if not stack:
                    return outcome
                parent = stack[-1]
                self._offer(parent, parent.pending_action, outcome, profile)
                continue

            successor = self._advance(frame.state, action)
            self._visit()
            if successor.is_terminal():
                self._offer(frame, action, successor.outcome(), profile)
            else:
                frame.pending_action = action
                stack.append(self._open(successor))

    def _reset(self) -> None:
        self.nodes_visited = 0
        self._seen_information_sets = set()

    def _visit(self) -> None:
        self.nodes_visited += 1
        if self.progress is not None:
            self.progress.update(1)

    def _open(self, state: GameState) -> "_Frame":
        player = state.player()
        if player is None:
            raise MissingPlayer(f"Non-terminal state has no player: {state!r}", state)

        information_set = state.information_set()
        if self.strict_information_sets:
            if information_set in self._seen_information_sets:
                raise NonSingletonInformationSet(
                    f"Information set {information_set!r} reached twice: {state!r}", state
                )
            self._seen_information_sets.add(information_set)

        return _Frame(state, player, information_set, iter(state.actions()))

    def _advance(self, state: GameState, action: Any) -> GameState:
        try:
            successor = state.advance(action)
        except ContractViolation:
            raise
        except (ValueError, KeyError) as e:
            raise MissingSuccessor(f"advance({action!r}) failed at {state!r}: {e}", state) from e
        if successor is None:
            raise MissingSuccessor(f"advance({action!r}) returned no state at {state!r}", state)
        return successor

    def _offer(self, frame: "_Frame", action: Any, outcome: Outcome, profile: PureStrategyProfile) -> None:
        utility = outcome.utility(frame.player)
        # Strictly greater only: ties keep the earliest action
        if frame.best_utility is None or utility > frame.best_utility:
            frame.best_utility = utility
            frame.best_outcome = outcome
            profile.insert(frame.information_set, action)

    def _close(self, frame: "_Frame") -> Outcome:
        if frame.best_outcome is None:
            raise EmptyActionSet(f"Non-terminal state has no actions: {frame.state!r}", frame.state)
        logger.debug(
            "Resolved %r for player %r: %r", frame.information_set, frame.player, frame.best_utility
        )
        return frame.best_outcome


_EXHAUSTED = object()
