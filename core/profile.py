from typing import Dict, Generic, Hashable, Iterator, Optional, Tuple, TypeVar

InformationSet = TypeVar("InformationSet", bound=Hashable)
Action = TypeVar("Action")


class PureStrategyProfile(Generic[InformationSet, Action]):
    """
    One deterministic action per information set.

    Filled by the solver during a single traversal; a later insert for the
    same information set replaces the earlier one.
    """

    def __init__(self):
        self._actions: Dict[InformationSet, Action] = {}

    def insert(self, information_set: InformationSet, action: Action) -> None:
        self._actions[information_set] = action

    def action(self, information_set: InformationSet) -> Optional[Action]:
        """Action chosen at information_set, or None if it was never visited."""
        return self._actions.get(information_set)

    def items(self) -> Iterator[Tuple[InformationSet, Action]]:
        return iter(self._actions.items())

    def to_dict(self) -> Dict[InformationSet, Action]:
        return dict(self._actions)

    @classmethod
    def from_dict(cls, actions: Dict[InformationSet, Action]) -> "PureStrategyProfile":
        profile = cls()
        for information_set, action in actions.items():
            profile.insert(information_set, action)
        return profile

    def __contains__(self, information_set) -> bool:
        return information_set in self._actions

    def __iter__(self) -> Iterator[InformationSet]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PureStrategyProfile):
            return NotImplemented
        return self._actions == other._actions

    def __repr__(self) -> str:
        return f"PureStrategyProfile({self._actions!r})"
