import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent


def run_main(*args):
    return subprocess.run(
        [sys.executable, "main.py", *args],
        capture_output=True,
        text=True,
        cwd=ROOT,
    )


class TestIntegration:
    """End-to-end CLI tests."""

    def test_default_runs_ultimatum(self):
        result = run_main()
        assert result.returncode == 0, f"stderr: {result.stderr}"
        assert "Unfair -> Accept" in result.stdout

    def test_centipede_with_tree(self):
        result = run_main("centipede", "--rounds", "4", "--tree", "--method", "recursive")
        assert result.returncode == 0, f"stderr: {result.stderr}"
        assert "Perfect information: True" in result.stdout

    def test_quiet(self):
        result = run_main("ultimatum", "--quiet")
        assert result.returncode == 0, f"stderr: {result.stderr}"
        assert result.stdout == ""

    def test_save(self, tmp_path):
        path = tmp_path / "out.profile.gz"
        result = run_main("ultimatum", "-q", "--save", str(path))
        assert result.returncode == 0, f"stderr: {result.stderr}"

        from solver import Solver
        profile, _ = Solver.load_profile(str(path))
        assert profile.action("initial") == "Unfair"

    def test_file_with_strict_preset_rejects_shared_sets(self, tmp_path):
        path = tmp_path / "game.yaml"
        path.write_text(
            "player: A\n"
            "actions:\n"
            "  l: {player: B, information_set: B, actions: {x: {outcome: {A: 0, B: 0}}}}\n"
            "  r: {player: B, information_set: B, actions: {x: {outcome: {A: 1, B: 0}}}}\n"
        )
        result = run_main("file", str(path), "-c", "strict", "-q")
        assert result.returncode == 1
        assert "NonSingletonInformationSet" in result.stderr

    def test_unknown_preset(self):
        result = run_main("ultimatum", "-c", "nonexistent")
        assert result.returncode == 1
        assert "not found" in result.stderr

    def test_missing_game_file(self, tmp_path):
        result = run_main("file", str(tmp_path / "missing.yaml"))
        assert result.returncode == 1
        assert "Game file not found" in result.stderr

    def test_broken_equilibrium_path_reports_error(self, tmp_path):
        """A shared set whose last write is illegal on the chosen branch exits cleanly."""
        path = tmp_path / "game.yaml"
        path.write_text(
            "player: A\n"
            "actions:\n"
            "  l: {player: B, information_set: S, actions: {x: {outcome: {A: 5, B: 0}}}}\n"
            "  r: {player: B, information_set: S, actions: {y: {outcome: {A: 1, B: 0}}}}\n"
        )
        result = run_main("file", str(path), "-q")
        assert result.returncode == 1
        assert "Error: MissingSuccessor" in result.stderr
        assert "Traceback" not in result.stderr

    def test_unhashable_information_set_in_file(self, tmp_path):
        path = tmp_path / "game.yaml"
        path.write_text(
            "player: A\n"
            "information_set: [1, 2]\n"
            "actions: {x: {outcome: {A: 1}}}\n"
        )
        result = run_main("file", str(path), "-q")
        assert result.returncode == 1
        assert "Error loading game" in result.stderr
