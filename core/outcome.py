from types import MappingProxyType
from typing import Dict, Hashable, Iterator, Mapping

from core.errors import MissingUtility

Player = Hashable


class Outcome(Mapping):
    """
    Utilities realized at a node, one per player.

    Immutable once constructed. Usually produced by terminal states, but any
    state may report one.

    Example:
        outcome = Outcome({"proposer": 8.0, "responder": 2.0})
        outcome.utility("proposer")  # 8.0
    """

    __slots__ = ("_utilities",)

    def __init__(self, utilities: Mapping[Player, float]):
        self._utilities = MappingProxyType(
            {player: float(value) for player, value in utilities.items()}
        )

    def utility(self, player: Player) -> float:
        """Utility for player, u_i(z)."""
        try:
            return self._utilities[player]
        except KeyError:
            raise MissingUtility(
                f"Outcome has no utility for player {player!r}: {dict(self._utilities)}"
            ) from None

    def players(self) -> Iterator[Player]:
        return iter(self._utilities)

    def as_dict(self) -> Dict[Player, float]:
        return dict(self._utilities)

    def __getitem__(self, player: Player) -> float:
        return self._utilities[player]

    def __iter__(self) -> Iterator[Player]:
        return iter(self._utilities)

    def __len__(self) -> int:
        return len(self._utilities)

    def __repr__(self) -> str:
        return f"Outcome({dict(self._utilities)!r})"
