"""YAML config loader for solver settings."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

METHODS = ("recursive", "iterative")
DEVICES = ("auto", "cpu", "cuda", "mps")


@dataclass
class SolverConfig:
    """Configuration for the backward-induction solver.

    Attributes:
        name: Human-readable name for this configuration.
        method: "recursive" or "iterative" traversal (default iterative).
        strict_information_sets: Fail when an information set holds more than one node.
        recursion_limit: Interpreter recursion limit to set for the recursive method.
        device: Torch device for materialized game trees.
    """
    name: str = "Custom"
    method: str = "iterative"
    strict_information_sets: bool = False
    recursion_limit: Optional[int] = None
    device: str = "cpu"


def load_config(path: str) -> SolverConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        SolverConfig with loaded settings; missing fields keep their defaults.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If fields are invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML syntax: {e}")

    # An empty file means all defaults
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Config file must contain a YAML mapping (dict), not a scalar or list")

    unknown = set(data) - {"name", "method", "strict_information_sets", "recursion_limit", "device"}
    if unknown:
        raise ValueError(f"Unknown config field(s): {', '.join(sorted(unknown))}")

    name = str(data.get('name', 'Custom'))

    method = data.get('method', 'iterative')
    if method not in METHODS:
        raise ValueError(f"method must be one of {', '.join(METHODS)}, got: {method}")

    strict = data.get('strict_information_sets', False)
    if not isinstance(strict, bool):
        raise ValueError(f"strict_information_sets must be true or false, got: {strict}")

    recursion_limit = data.get('recursion_limit')
    if recursion_limit is not None:
        if isinstance(recursion_limit, bool) or not isinstance(recursion_limit, int) or recursion_limit < 1:
            raise ValueError(f"recursion_limit must be a positive integer, got: {recursion_limit}")

    device = data.get('device', 'cpu')
    if device not in DEVICES:
        raise ValueError(f"device must be one of {', '.join(DEVICES)}, got: {device}")

    return SolverConfig(
        name=name,
        method=method,
        strict_information_sets=strict,
        recursion_limit=recursion_limit,
        device=device,
    )


def get_preset_path(name: str) -> str:
    """Get the path to a preset configuration file.

    Args:
        name: Name of the preset (without .yaml extension).

    Returns:
        Absolute path to the preset file.
    """
    module_dir = Path(__file__).parent
    preset_path = module_dir / "presets" / f"{name}.yaml"
    return str(preset_path.resolve())
