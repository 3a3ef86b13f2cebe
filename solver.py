from typing import Dict, Optional, Tuple
import gzip
import logging
import pickle
import sys

from tqdm import tqdm

from config.loader import SolverConfig
from core.history import History
from core.outcome import Outcome
from core.profile import PureStrategyProfile
from core.tree import GameTree
from games.base import GameState
from induction.backward import BackwardInduction
from induction.verify import follow_profile, is_subgame_perfect

logger = logging.getLogger(__name__)


class Solver:
    """
    High-level API for finding a subgame-perfect equilibrium.

    Example:
        solver = Solver(UltimatumState())
        profile = solver.solve()
        print(profile.action("initial"), solver.root_utility("proposer"))
    """

    def __init__(
        self,
        root: GameState,
        config: Optional[SolverConfig] = None,
        method: Optional[str] = None,
        strict: Optional[bool] = None,
        verbose: bool = False,
    ):
        """
        Initialize solver.

        Args:
            root: Initial state of the game to solve
            config: Solver settings (defaults to SolverConfig())
            method: Overrides config.method ("recursive" or "iterative")
            strict: Overrides config.strict_information_sets
            verbose: Show a progress bar while resolving nodes
        """
        self.root = root
        self.config = config or SolverConfig()
        self.method = method or self.config.method
        self.strict = self.config.strict_information_sets if strict is None else strict
        self.verbose = verbose

        self._profile: Optional[PureStrategyProfile] = None
        self._outcome: Optional[Outcome] = None
        self.nodes_visited = 0

    def solve(self) -> PureStrategyProfile:
        """
        Run backward induction from the root.

        Returns:
            The equilibrium action for every visited information set
        """
        if self.method == "recursive" and self.config.recursion_limit:
            if sys.getrecursionlimit() < self.config.recursion_limit:
                logger.debug("Raising recursion limit to %d", self.config.recursion_limit)
                sys.setrecursionlimit(self.config.recursion_limit)

        progress = tqdm(desc="Resolving nodes", unit="node", disable=not self.verbose)
        try:
            engine = BackwardInduction(
                method=self.method,
                strict_information_sets=self.strict,
                progress=progress,
            )
            self._profile, self._outcome = engine.solve_with_outcome(self.root)
        finally:
            progress.close()

        self.nodes_visited = engine.nodes_visited
        return self._profile

    def get_profile(self) -> PureStrategyProfile:
        """Equilibrium profile, solving first if needed."""
        if self._profile is None:
            self.solve()
        return self._profile

    def root_outcome(self) -> Outcome:
        """Outcome reached from the root when everyone follows the profile."""
        if self._outcome is None:
            self.solve()
        return self._outcome

    def root_utility(self, player) -> float:
        return self.root_outcome().utility(player)

    def equilibrium_path(self) -> Tuple[History, Outcome]:
        """Actions played from the root under the equilibrium profile."""
        return follow_profile(self.root, self.get_profile())

    def verify(self, tolerance: float = 1e-9) -> bool:
        """Check that no player gains from a one-shot deviation."""
        return is_subgame_perfect(self.root, self.get_profile(), tolerance)

    def tree(self, verbose: bool = False) -> GameTree:
        """Materialize the full game tree (for inspection, not needed to solve)."""
        return GameTree.from_root(self.root, device=self.config.device, verbose=verbose)

    def save_profile(self, path: str) -> None:
        """
        Save the equilibrium profile to a compressed file.

        Args:
            path: File path (recommended: .profile.gz extension)
        """
        data = {
            "profile": self.get_profile().to_dict(),
            "root_outcome": self.root_outcome().as_dict(),
        }
        with gzip.open(path, "wb", compresslevel=6) as f:
            pickle.dump(data, f, protocol=pickle.HIGHEST_PROTOCOL)

    @staticmethod
    def load_profile(path: str) -> Tuple[PureStrategyProfile, Optional[Outcome]]:
        """
        Load a profile saved with save_profile().

        Also accepts a bare {information_set: action} mapping.

        Returns:
            (profile, root outcome or None)
        """
        with gzip.open(path, "rb") as f:
            data: Dict = pickle.load(f)

        if isinstance(data, dict) and "profile" in data:
            outcome = data.get("root_outcome")
            return (
                PureStrategyProfile.from_dict(data["profile"]),
                Outcome(outcome) if outcome is not None else None,
            )
        return PureStrategyProfile.from_dict(data), None
