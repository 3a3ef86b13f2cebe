import pytest
from core.errors import MissingSuccessor
from games.ultimatum import UltimatumState


class TestUltimatumState:
    def test_state_is_immutable(self):
        """UltimatumState should be immutable (frozen dataclass)."""
        state = UltimatumState()
        with pytest.raises(AttributeError):
            state.history = ("Fair",)

    def test_state_hashable(self):
        d = {UltimatumState(history=("Fair",)): "value"}
        assert d[UltimatumState(history=("Fair",))] == "value"

    def test_players(self):
        assert UltimatumState().player() == "proposer"
        assert UltimatumState(history=("Fair",)).player() == "responder"
        assert UltimatumState(history=("Fair", "Reject")).player() is None

    def test_actions_are_lazy(self):
        actions = UltimatumState().actions()
        assert iter(actions) is actions
        assert list(actions) == ["Fair", "Unfair"]
        assert list(UltimatumState(history=("Unfair",)).actions()) == ["Accept", "Reject"]

    def test_information_sets(self):
        assert UltimatumState().information_set() == "initial"
        assert UltimatumState(history=("Fair",)).information_set() == "after Fair"
        assert UltimatumState(history=("Unfair",)).information_set() == "after Unfair"

    def test_advance(self):
        state = UltimatumState().advance("Fair").advance("Accept")
        assert state == UltimatumState(history=("Fair", "Accept"))
        assert state.is_terminal()

    def test_advance_illegal_action(self):
        with pytest.raises(MissingSuccessor):
            UltimatumState().advance("Accept")

    def test_advance_terminal(self):
        with pytest.raises(MissingSuccessor):
            UltimatumState(history=("Fair", "Accept")).advance("Fair")


class TestUltimatumOutcomes:
    @pytest.mark.parametrize("history, proposer, responder", [
        (("Fair", "Accept"), 5.0, 5.0),
        (("Fair", "Reject"), 0.0, 0.0),
        (("Unfair", "Accept"), 8.0, 2.0),
        (("Unfair", "Reject"), 0.0, 0.0),
    ])
    def test_payoffs(self, history, proposer, responder):
        outcome = UltimatumState(history=history).outcome()
        assert outcome.utility("proposer") == proposer
        assert outcome.utility("responder") == responder

    def test_outcome_of_non_terminal(self):
        with pytest.raises(ValueError):
            UltimatumState().outcome()
