import sys

import pytest
from core.errors import MissingSuccessor
from games.centipede import CentipedeState
from solver import Solver


class TestCentipedeState:
    def test_players_alternate(self):
        state = CentipedeState(rounds=4)
        players = []
        while not state.is_terminal():
            players.append(state.player())
            state = state.advance("pass")
        assert players == [0, 1, 0, 1]

    def test_take_ends_game(self):
        state = CentipedeState(rounds=4).advance("pass").advance("take")
        assert state.is_terminal()
        assert state.outcome().as_dict() == {1: 6.0, 0: 3.0}

    def test_all_pass_payoff(self):
        state = CentipedeState(rounds=3)
        for _ in range(3):
            state = state.advance("pass")
        # Player 1 would move next and gets the large pile
        assert state.outcome().as_dict() == {1: 10.0, 0: 7.0}

    def test_illegal_action(self):
        with pytest.raises(MissingSuccessor):
            CentipedeState(rounds=2).advance("steal")

    def test_information_set_is_stage(self):
        assert CentipedeState(rounds=5, stage=3).information_set() == 3


class TestCentipedeEquilibrium:
    @pytest.mark.parametrize("rounds", [1, 2, 5, 10])
    def test_take_everywhere(self, rounds):
        """Backward induction unravels the game: every mover takes."""
        solver = Solver(CentipedeState(rounds=rounds))
        profile = solver.solve()

        assert len(profile) == rounds
        assert all(action == "take" for _, action in profile.items())
        assert solver.root_utility(0) == 4.0
        assert solver.root_utility(1) == 1.0

    def test_long_game_payoffs_stay_finite(self):
        """Pile sizes grow linearly, so very long games still have outcomes."""
        state = CentipedeState(rounds=1100, stage=1100)
        assert state.outcome().as_dict() == {0: 2204.0, 1: 2201.0}

    @pytest.mark.parametrize("method", ["recursive", "iterative"])
    def test_solve_more_than_1024_stages(self, method):
        original = sys.getrecursionlimit()
        try:
            sys.setrecursionlimit(max(original, 5000))
            solver = Solver(CentipedeState(rounds=1100), method=method)
            profile = solver.solve()
        finally:
            sys.setrecursionlimit(original)

        assert len(profile) == 1100
        assert profile.action(1099) == "take"
        assert solver.root_utility(0) == 4.0
