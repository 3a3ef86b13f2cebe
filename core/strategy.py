from typing import Dict, Generic, Hashable, Mapping, Optional, Tuple, TypeVar

import numpy as np

from core.history import History
from core.outcome import Outcome
from core.profile import PureStrategyProfile

Action = TypeVar("Action")
InformationSet = Hashable


class ActionDistribution(Generic[Action]):
    """Probability distribution over the actions of one information set."""

    def __init__(self, probabilities: Mapping[Action, float]):
        for action, probability in probabilities.items():
            if probability < 0:
                raise ValueError(f"Negative probability {probability} for action {action!r}")
        self.probabilities: Dict[Action, float] = dict(probabilities)

    def sample(self, rng: np.random.Generator) -> Action:
        """
        Draw one action.

        Raises:
            ValueError: If the mapping is not a probability distribution
        """
        if not self.probabilities or not self.is_normalized():
            raise ValueError(
                f"Mapping over action space does not constitute a probability distribution: {self.probabilities}"
            )
        actions = list(self.probabilities)
        policy = np.fromiter(self.probabilities.values(), dtype=np.float64, count=len(actions))
        choice = rng.choice(np.arange(len(actions)), p=policy / policy.sum())
        return actions[choice]

    def weight(self, action: Action) -> Optional[float]:
        return self.probabilities.get(action)

    def is_normalized(self, tolerance: float = 1e-6) -> bool:
        return abs(sum(self.probabilities.values()) - 1.0) <= tolerance

    def __repr__(self) -> str:
        return f"ActionDistribution({self.probabilities!r})"


class Strategy:
    """Behavioral strategy: an action distribution per information set."""

    def __init__(self, distributions: Optional[Mapping[InformationSet, ActionDistribution]] = None):
        self.distributions: Dict[InformationSet, ActionDistribution] = dict(distributions or {})

    @classmethod
    def from_pure(cls, profile: PureStrategyProfile) -> "Strategy":
        """Degenerate strategy playing the profile's action with probability 1."""
        return cls({
            information_set: ActionDistribution({action: 1.0})
            for information_set, action in profile.items()
        })

    def distribution(self, information_set: InformationSet) -> Optional[ActionDistribution]:
        return self.distributions.get(information_set)

    def sample_action(self, information_set: InformationSet, rng: np.random.Generator):
        distribution = self.distributions.get(information_set)
        if distribution is None:
            raise KeyError(f"No distribution for information set {information_set!r}")
        return distribution.sample(rng)

    def __len__(self) -> int:
        return len(self.distributions)


def play(root, strategy: Strategy, rng: Optional[np.random.Generator] = None) -> Tuple[History, Outcome]:
    """
    Sample one play of the game from root.

    Args:
        root: Initial game state
        strategy: Strategy covering every information set that can be reached
        rng: Random source (defaults to np.random.default_rng())

    Returns:
        (actions played, terminal outcome)
    """
    if rng is None:
        rng = np.random.default_rng()
    history = History()
    state = root
    while not state.is_terminal():
        action = strategy.sample_action(state.information_set(), rng)
        history.push(action)
        state = state.advance(action)
    return history, state.outcome()
