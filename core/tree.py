from dataclasses import dataclass, field
from collections import Counter
from typing import Any, Dict, Iterator, List, Optional

import torch
from torch import Tensor
from tqdm import tqdm

from core.errors import EmptyActionSet, MissingPlayer
from games.base import GameState


def resolve_device(preference: str = "auto") -> torch.device:
    """
    Pick the torch device for tree tensors.

    Args:
        preference: One of "auto", "cpu", "cuda", "mps"

    Raises:
        ValueError: If the requested device is unknown or unavailable
    """
    available = {
        "cpu": True,
        "cuda": torch.cuda.is_available(),
        "mps": torch.backends.mps.is_available(),
    }
    if preference == "auto":
        for name in ("cuda", "mps"):
            if available[name]:
                return torch.device(name)
        return torch.device("cpu")

    if preference not in available:
        raise ValueError(f"Unknown device: {preference}. Use 'auto', 'cpu', 'cuda', or 'mps'")
    if not available[preference]:
        raise ValueError(f"{preference.upper()} requested but not available")
    return torch.device(preference)


@dataclass
class GameTree:
    """
    Fully materialized game tree.

    Nodes are numbered in depth-first pre-order, the root is node 0. The
    states themselves are kept in `states`; topology and terminal utilities
    are encoded as tensors.
    """

    states: List[GameState]

    # Node topology [num_nodes]
    node_parent: Tensor       # Parent index (-1 for the root)
    node_depth: Tensor        # Distance from the root
    node_player: Tensor       # Player index (-1 for terminal)

    # Transitions [num_nodes, max_actions]
    action_child: Tensor      # Child node index (0 where masked)
    action_mask: Tensor       # Valid action mask

    # Terminal info [num_nodes, num_players]
    terminal_mask: Tensor     # Is this a terminal node? [num_nodes]
    terminal_utils: Tensor    # Utilities (0 for non-terminal)

    node_actions: List[List[Any]]
    node_info_set: List[Any]  # None for terminal nodes
    player_to_idx: Dict[Any, int]

    num_nodes: int
    max_actions: int
    device: torch.device

    idx_to_player: Dict[int, Any] = field(init=False)

    def __post_init__(self):
        self.idx_to_player = {v: k for k, v in self.player_to_idx.items()}

    @classmethod
    def from_root(cls, root: GameState, device: str = "cpu", verbose: bool = False) -> "GameTree":
        """
        Enumerate every node reachable from root.

        Raises:
            MissingPlayer: If a non-terminal node reports no player
            EmptyActionSet: If a non-terminal node has no actions
        """
        torch_device = resolve_device(device) if isinstance(device, str) else device

        states: List[GameState] = []
        parents: List[int] = []
        depths: List[int] = []
        players: List[Any] = []
        info_sets: List[Any] = []
        children: List[List[int]] = []
        actions: List[List[Any]] = []
        outcomes: Dict[int, Any] = {}

        progress = tqdm(desc="Enumerating nodes", unit="node", disable=not verbose)
        # (state, parent index, depth); reversed pushes keep pre-order
        pending = [(root, -1, 0)]
        while pending:
            state, parent, depth = pending.pop()
            idx = len(states)
            states.append(state)
            parents.append(parent)
            depths.append(depth)
            children.append([])
            if parent >= 0:
                children[parent].append(idx)
            progress.update(1)

            if state.is_terminal():
                players.append(None)
                info_sets.append(None)
                actions.append([])
                outcomes[idx] = state.outcome()
                continue

            player = state.player()
            if player is None:
                raise MissingPlayer(f"Non-terminal state has no player: {state!r}", state)
            node_actions = list(state.actions())
            if not node_actions:
                raise EmptyActionSet(f"Non-terminal state has no actions: {state!r}", state)

            players.append(player)
            info_sets.append(state.information_set())
            actions.append(node_actions)
            successors = [state.advance(action) for action in node_actions]
            for successor in reversed(successors):
                pending.append((successor, idx, depth + 1))
        progress.close()

        player_to_idx: Dict[Any, int] = {}
        for player in players:
            if player is not None and player not in player_to_idx:
                player_to_idx[player] = len(player_to_idx)
        for outcome in outcomes.values():
            for player in outcome.players():
                if player not in player_to_idx:
                    player_to_idx[player] = len(player_to_idx)

        num_nodes = len(states)
        num_players = len(player_to_idx)
        max_actions = max((len(a) for a in actions), default=0)

        child_list = []
        mask_list = []
        utils_list = []
        for idx in range(num_nodes):
            node_children = children[idx]
            padding = max_actions - len(node_children)
            child_list.append(node_children + [0] * padding)
            mask_list.append([True] * len(node_children) + [False] * padding)

            utils = [0.0] * num_players
            if idx in outcomes:
                for player, value in outcomes[idx].items():
                    utils[player_to_idx[player]] = value
            utils_list.append(utils)

        return cls(
            states=states,
            node_parent=torch.tensor(parents, dtype=torch.long, device=torch_device),
            node_depth=torch.tensor(depths, dtype=torch.long, device=torch_device),
            node_player=torch.tensor(
                [player_to_idx[p] if p is not None else -1 for p in players],
                dtype=torch.long, device=torch_device,
            ),
            action_child=torch.tensor(child_list, dtype=torch.long, device=torch_device).reshape(num_nodes, max_actions),
            action_mask=torch.tensor(mask_list, dtype=torch.bool, device=torch_device).reshape(num_nodes, max_actions),
            terminal_mask=torch.tensor([idx in outcomes for idx in range(num_nodes)], dtype=torch.bool, device=torch_device),
            terminal_utils=torch.tensor(utils_list, dtype=torch.float32, device=torch_device).reshape(num_nodes, num_players),
            node_actions=actions,
            node_info_set=info_sets,
            player_to_idx=player_to_idx,
            num_nodes=num_nodes,
            max_actions=max_actions,
            device=torch_device,
        )

    def root(self) -> GameState:
        return self.states[0]

    def node_state(self, idx: int) -> Optional[GameState]:
        if 0 <= idx < self.num_nodes:
            return self.states[idx]
        return None

    def children(self, idx: int) -> List[int]:
        return self.action_child[idx][self.action_mask[idx]].tolist()

    def predecessors(self, idx: int) -> Iterator[int]:
        """Parent of idx, if any. Tree nodes have at most one."""
        parent = int(self.node_parent[idx])
        if parent >= 0:
            yield parent

    def terminal_nodes(self) -> Iterator[GameState]:
        for idx in torch.nonzero(self.terminal_mask).flatten().tolist():
            yield self.states[idx]

    @property
    def max_depth(self) -> int:
        return int(self.node_depth.max()) if self.num_nodes else 0

    def information_set_sizes(self) -> Counter:
        """Number of decision nodes per information set."""
        return Counter(info for info in self.node_info_set if info is not None)

    def is_perfect_information(self) -> bool:
        """True iff every information set contains exactly one decision node."""
        return all(count == 1 for count in self.information_set_sizes().values())
