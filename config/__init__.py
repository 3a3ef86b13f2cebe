"""Config module for solver configuration loading."""

from .loader import SolverConfig, load_config, get_preset_path

__all__ = ["SolverConfig", "load_config", "get_preset_path"]
