import pytest
from games.base import GameState
from games.ultimatum import UltimatumState


def test_game_state_is_abstract():
    """GameState should be an abstract base class."""
    with pytest.raises(TypeError):
        GameState()


def test_game_state_has_required_methods():
    """GameState ABC should define all required abstract methods."""
    abstract_methods = {
        'advance',
        'actions',
        'information_set',
        'player',
        'outcome',
    }
    assert abstract_methods == set(GameState.__abstractmethods__)


def test_is_terminal_defaults_to_missing_player():
    """is_terminal() is derived from player() unless overridden."""
    assert UltimatumState().is_terminal() is False
    assert UltimatumState(history=("Fair", "Accept")).is_terminal() is True
