import pytest
import torch
from core.errors import EmptyActionSet, MissingPlayer
from core.tree import GameTree, resolve_device
from games.centipede import CentipedeState
from games.explicit import ExplicitState
from games.ultimatum import UltimatumState


class TestResolveDevice:
    def test_cpu(self):
        assert resolve_device("cpu") == torch.device("cpu")

    def test_auto_returns_device(self):
        assert isinstance(resolve_device("auto"), torch.device)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown device"):
            resolve_device("tpu")


class TestGameTree:
    @pytest.fixture
    def tree(self):
        return GameTree.from_root(UltimatumState(), device="cpu")

    def test_node_count(self, tree):
        assert tree.num_nodes == 7
        assert tree.max_actions == 2
        assert tree.max_depth == 2

    def test_root(self, tree):
        assert tree.root() == UltimatumState()
        assert list(tree.predecessors(0)) == []

    def test_pre_order_children(self, tree):
        fair, unfair = tree.children(0)
        assert tree.node_state(fair) == UltimatumState(history=("Fair",))
        assert tree.node_state(unfair) == UltimatumState(history=("Unfair",))
        assert list(tree.predecessors(fair)) == [0]

    def test_node_state_out_of_range(self, tree):
        assert tree.node_state(99) is None

    def test_terminal_nodes(self, tree):
        histories = [state.history for state in tree.terminal_nodes()]
        assert histories == [
            ("Fair", "Accept"), ("Fair", "Reject"),
            ("Unfair", "Accept"), ("Unfair", "Reject"),
        ]

    def test_tensor_shapes(self, tree):
        n = tree.num_nodes
        assert tree.node_parent.shape == (n,)
        assert tree.node_player.shape == (n,)
        assert tree.action_child.shape == (n, 2)
        assert tree.action_mask.shape == (n, 2)
        assert tree.terminal_utils.shape == (n, 2)

    def test_terminal_marked(self, tree):
        for idx in torch.where(tree.terminal_mask)[0]:
            assert tree.node_player[idx] == -1
            assert not tree.action_mask[idx].any()

    def test_terminal_utils(self, tree):
        proposer = tree.player_to_idx["proposer"]
        responder = tree.player_to_idx["responder"]
        for idx, state in enumerate(tree.states):
            if state.is_terminal():
                outcome = state.outcome()
                assert tree.terminal_utils[idx, proposer] == outcome.utility("proposer")
                assert tree.terminal_utils[idx, responder] == outcome.utility("responder")

    def test_player_mapping_bijective(self, tree):
        for player, idx in tree.player_to_idx.items():
            assert tree.idx_to_player[idx] == player

    def test_perfect_information(self, tree):
        assert tree.is_perfect_information()
        assert tree.information_set_sizes()["initial"] == 1


class TestGameTreeInformationSets:
    def test_shared_information_set(self):
        root = ExplicitState({"player": "A", "actions": {
            "l": {"player": "B", "information_set": "B", "actions": {"x": {"outcome": {"A": 0, "B": 0}}}},
            "r": {"player": "B", "information_set": "B", "actions": {"x": {"outcome": {"A": 0, "B": 0}}}},
        }})
        tree = GameTree.from_root(root)
        assert not tree.is_perfect_information()
        assert tree.information_set_sizes()["B"] == 2

    def test_centipede_depth(self):
        tree = GameTree.from_root(CentipedeState(rounds=5))
        assert tree.num_nodes == 11
        assert tree.max_depth == 5


class TestGameTreeContract:
    def test_missing_player(self):
        root = ExplicitState({"player": "A", "actions": {"x": {"actions": {"y": {"outcome": {"A": 1}}}}}})
        with pytest.raises(MissingPlayer):
            GameTree.from_root(root)

    def test_empty_actions(self):
        root = ExplicitState({"player": "A", "actions": {"x": {"player": "B", "actions": {}}}})
        with pytest.raises(EmptyActionSet):
            GameTree.from_root(root)
