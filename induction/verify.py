"""
One-shot-deviation check for pure strategy profiles.

A profile of a finite perfect-information game is subgame perfect iff no
player gains by changing the action at a single decision node while the rest
of the profile stays fixed.
"""

from dataclasses import dataclass
from typing import Any, List, Tuple

from core.history import History
from core.outcome import Outcome
from core.profile import PureStrategyProfile
from games.base import GameState


@dataclass(frozen=True)
class Deviation:
    """A profitable single-node deviation."""
    history: Tuple[Any, ...]
    information_set: Any
    player: Any
    recorded_action: Any
    better_action: Any
    gain: float


def follow_profile(state: GameState, profile: PureStrategyProfile) -> Tuple[History, Outcome]:
    """
    Play the profile from state until a terminal node is reached.

    Returns:
        (actions played, terminal outcome)

    Raises:
        ValueError: If the profile has no action for a reached information set
    """
    history = History()
    while not state.is_terminal():
        information_set = state.information_set()
        if information_set not in profile:
            raise ValueError(f"Profile has no action for information set {information_set!r}")
        action = profile.action(information_set)
        history.push(action)
        state = state.advance(action)
    return history, state.outcome()


def deviation_gains(
    root: GameState,
    profile: PureStrategyProfile,
    tolerance: float = 1e-9,
) -> List[Deviation]:
    """Every decision node where another action beats the recorded one."""
    deviations = []
    # Explicit stack of (state, history to state)
    pending = [(root, ())]

    while pending:
        state, history = pending.pop()
        if state.is_terminal():
            continue

        player = state.player()
        information_set = state.information_set()
        if information_set not in profile:
            raise ValueError(f"Profile has no action for information set {information_set!r}")
        recorded = profile.action(information_set)
        _, recorded_outcome = follow_profile(state.advance(recorded), profile)
        recorded_utility = recorded_outcome.utility(player)

        best_action, best_gain = None, tolerance
        children = []
        for action in state.actions():
            successor = state.advance(action)
            children.append((successor, history + (action,)))
            if action == recorded:
                continue
            _, outcome = follow_profile(successor, profile)
            gain = outcome.utility(player) - recorded_utility
            if gain > best_gain:
                best_action, best_gain = action, gain

        if best_action is not None:
            deviations.append(Deviation(
                history=history,
                information_set=information_set,
                player=player,
                recorded_action=recorded,
                better_action=best_action,
                gain=best_gain,
            ))

        pending.extend(reversed(children))

    return deviations


def is_subgame_perfect(
    root: GameState,
    profile: PureStrategyProfile,
    tolerance: float = 1e-9,
) -> bool:
    """True iff no single-node deviation gains more than tolerance."""
    return not deviation_gains(root, profile, tolerance)
