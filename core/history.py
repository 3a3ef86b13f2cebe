from typing import Generic, Iterable, Iterator, List, Optional, TypeVar

Action = TypeVar("Action")


class History(Generic[Action]):
    """The action sequence h_t played from the root up to time t."""

    def __init__(self, actions: Optional[Iterable[Action]] = None):
        self.actions: List[Action] = list(actions) if actions is not None else []

    def push(self, action: Action) -> None:
        self.actions.append(action)

    def last(self) -> Optional[Action]:
        return self.actions[-1] if self.actions else None

    def __iter__(self) -> Iterator[Action]:
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)

    def __eq__(self, other) -> bool:
        if isinstance(other, History):
            return self.actions == other.actions
        return NotImplemented

    def __repr__(self) -> str:
        return f"History({self.actions!r})"
