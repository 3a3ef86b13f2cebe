#!/usr/bin/env python3
"""
Backward-Induction SPNE Solver - Main Entry Point

Usage:
    python main.py                          # Solve the ultimatum game
    python main.py ultimatum                # Explicit ultimatum subcommand
    python main.py centipede --rounds 20    # Centipede game with 20 stages
    python main.py file game.yaml -c strict # Game tree read from YAML
"""

import argparse
import logging
import os
import sys
import time

from config import SolverConfig, load_config, get_preset_path
from core.errors import ContractViolation
from solver import Solver


def resolve_config(args) -> SolverConfig:
    """Load config from a preset name or a path and apply CLI overrides."""
    if args.config is None:
        config = SolverConfig()
    else:
        config_path = args.config
        # Preset name: no path separator and no extension
        if os.path.sep not in config_path and not config_path.endswith('.yaml'):
            preset_path = get_preset_path(config_path)
            if not os.path.exists(preset_path):
                print(f"Error: Config preset '{args.config}' not found at {preset_path}", file=sys.stderr)
                sys.exit(1)
            config_path = preset_path
        try:
            config = load_config(config_path)
        except FileNotFoundError:
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        except ValueError as e:
            print(f"Error loading config: {e}", file=sys.stderr)
            sys.exit(1)

    if args.method:
        config.method = args.method
    if args.strict:
        config.strict_information_sets = True
    if args.device:
        config.device = args.device
    return config


def run(root, title: str, args) -> None:
    """Solve the game rooted at root and print the equilibrium."""
    config = resolve_config(args)

    if not args.quiet:
        print("=" * 50)
        print(f"SPNE Solver - {title}")
        print("=" * 50)
        print(f"Config: {config.name}")
        print(f"Method: {config.method}")
        print(f"Strict information sets: {config.strict_information_sets}")
        print()

    solver = Solver(root, config=config, verbose=not args.quiet)

    start_time = time.time()
    try:
        profile = solver.solve()
        elapsed = time.time() - start_time
        path, outcome = solver.equilibrium_path()
    except ContractViolation as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)

    if not args.quiet:
        print()
        print("=" * 50)
        print("Results")
        print("=" * 50)
        print(f"Time: {elapsed:.4f} seconds")
        print(f"Nodes visited: {solver.nodes_visited:,}")
        print(f"Information sets: {len(profile):,}")
        print()

        print("Strategy profile:")
        print("-" * 40)
        for information_set, action in profile.items():
            print(f"  {str(information_set):24s} -> {action}")
        print()

        print(f"Equilibrium path: {' -> '.join(str(a) for a in path)}")
        print("Root utilities:")
        for player, utility in outcome.items():
            print(f"  {str(player):24s} {utility:g}")

    if args.tree:
        tree = solver.tree(verbose=not args.quiet)
        print()
        print(f"Tree: {tree.num_nodes:,} nodes, depth {tree.max_depth}, "
              f"{int(tree.terminal_mask.sum()):,} terminal")
        print(f"Perfect information: {tree.is_perfect_information()}")

    if args.save:
        solver.save_profile(args.save)
        if not args.quiet:
            print(f"Profile saved to: {args.save}")


def run_ultimatum(args):
    """Solve the two-stage ultimatum game."""
    from games.ultimatum import UltimatumState
    run(UltimatumState(), "Ultimatum Game", args)


def run_centipede(args):
    """Solve the centipede game."""
    from games.centipede import CentipedeState
    if args.rounds < 1:
        print("Error: --rounds must be a positive integer", file=sys.stderr)
        sys.exit(1)
    run(CentipedeState(rounds=args.rounds), f"Centipede ({args.rounds} rounds)", args)


def run_file(args):
    """Solve a game tree described in YAML."""
    from games.explicit import load_game
    try:
        root = load_game(args.path)
    except FileNotFoundError:
        print(f"Error: Game file not found: {args.path}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error loading game: {e}", file=sys.stderr)
        sys.exit(1)
    run(root, os.path.basename(args.path), args)


def add_common_args(parser):
    """Add common arguments shared by all subcommands."""
    parser.add_argument(
        "--config", "-c", type=str,
        help="Config file path or preset name (default, strict)"
    )
    parser.add_argument(
        "--method", type=str, choices=["recursive", "iterative"],
        help="Traversal method (overrides config)"
    )
    parser.add_argument(
        "--strict", action="store_true",
        help="Fail if an information set contains more than one node"
    )
    parser.add_argument(
        "--device", "-d", type=str, choices=["auto", "cpu", "cuda", "mps"],
        help="Compute device for --tree (overrides config)"
    )
    parser.add_argument(
        "--save", "-s", type=str, metavar="FILE",
        help="Save the profile to file (recommended: .profile.gz)"
    )
    parser.add_argument(
        "--tree", action="store_true",
        help="Also materialize the game tree and print its size"
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true",
        help="Suppress progress output"
    )
    parser.add_argument(
        "--log-level", type=str, default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )


def main():
    # Check if first positional arg is a subcommand
    subcommands = {"ultimatum", "centipede", "file"}
    has_subcommand = len(sys.argv) > 1 and sys.argv[1] in subcommands

    if has_subcommand:
        parser = argparse.ArgumentParser(
            description="Backward-Induction SPNE Solver",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        subparsers = parser.add_subparsers(dest="command", help="Game to solve")

        ultimatum_parser = subparsers.add_parser("ultimatum", help="Solve the ultimatum game")
        add_common_args(ultimatum_parser)

        centipede_parser = subparsers.add_parser("centipede", help="Solve the centipede game")
        centipede_parser.add_argument(
            "--rounds", "-r", type=int, default=6,
            help="Number of decision stages (default: 6)"
        )
        add_common_args(centipede_parser)

        file_parser = subparsers.add_parser("file", help="Solve a game tree from a YAML file")
        file_parser.add_argument("path", type=str, help="YAML game description")
        add_common_args(file_parser)

        args = parser.parse_args()
    else:
        # No subcommand - default to the ultimatum game
        parser = argparse.ArgumentParser(description="Backward-Induction SPNE Solver")
        add_common_args(parser)
        args = parser.parse_args()
        args.command = "ultimatum"

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.command == "ultimatum":
        run_ultimatum(args)
    elif args.command == "centipede":
        run_centipede(args)
    elif args.command == "file":
        run_file(args)


if __name__ == "__main__":
    main()
