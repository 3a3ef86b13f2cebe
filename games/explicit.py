"""Games described as a nested mapping, either built in code or read from YAML."""

from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

import yaml

from core.errors import MissingSuccessor
from core.outcome import Outcome
from games.base import GameState


class ExplicitState(GameState):
    """
    Node of a game tree written out literally.

    A terminal node is a mapping with an "outcome" key. A decision node has
    "player", "actions" (an ordered mapping action -> child node) and an
    optional "information_set"; without one the node gets a singleton set
    keyed by the actions leading to it.

    Example:
        root = ExplicitState({
            "player": "A",
            "actions": {
                "L": {"outcome": {"A": 1, "B": 0}},
                "R": {"outcome": {"A": 0, "B": 1}},
            },
        })
    """

    def __init__(self, node: Mapping[str, Any], path: Tuple[Any, ...] = ()):
        self.node = node
        self.path = path

    def is_terminal(self) -> bool:
        return "outcome" in self.node

    def player(self) -> Optional[Any]:
        if self.is_terminal():
            return None
        return self.node.get("player")

    def actions(self) -> Iterator[Any]:
        return iter(self.node.get("actions") or {})

    def advance(self, action: Any) -> "ExplicitState":
        children = self.node.get("actions") or {}
        if self.is_terminal() or action not in children:
            raise MissingSuccessor(
                f"No successor for action {action!r} at {self.path or 'root'}", self
            )
        return ExplicitState(children[action], self.path + (action,))

    def information_set(self) -> Any:
        if "information_set" in self.node:
            return self.node["information_set"]
        return self.path

    def outcome(self) -> Outcome:
        if not self.is_terminal():
            raise ValueError(f"Node at {self.path or 'root'} has no outcome")
        return Outcome(self.node["outcome"])

    def __repr__(self) -> str:
        return f"ExplicitState(path={self.path!r})"


def _is_hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _validate_node(node: Any, where: str) -> None:
    if not isinstance(node, dict):
        raise ValueError(f"{where}: node must be a mapping, got: {type(node).__name__}")

    if "outcome" in node:
        outcome = node["outcome"]
        if not isinstance(outcome, dict) or not outcome:
            raise ValueError(f"{where}: outcome must be a non-empty mapping of player to utility")
        for player, value in outcome.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{where}: utility for {player!r} must be a number, got: {value!r}")
        return

    if "player" not in node:
        raise ValueError(f"{where}: decision node is missing 'player'")
    for key in ("player", "information_set"):
        if key in node and not _is_hashable(node[key]):
            raise ValueError(f"{where}: {key} must be a scalar identifier, got: {node[key]!r}")
    children = node.get("actions")
    if not isinstance(children, dict) or not children:
        raise ValueError(f"{where}: decision node needs a non-empty 'actions' mapping")
    for action, child in children.items():
        _validate_node(child, f"{where}/{action}")


def load_game(path: str) -> ExplicitState:
    """Load a game tree from a YAML file.

    Args:
        path: Path to the YAML game description.

    Returns:
        Root state of the described game.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the YAML is invalid or does not describe a game tree.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Game file not found: {path}")

    with open(path, 'r') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML syntax: {e}")

    if not isinstance(data, dict):
        raise ValueError("Game file must contain a YAML mapping (dict), not a scalar or list")

    # Allow either a bare root node or {name: ..., root: {...}}
    root: Dict[str, Any] = data.get("root", data)
    _validate_node(root, "root")
    return ExplicitState(root)
