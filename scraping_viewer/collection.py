"""Observable collection and a small typed publish/subscribe signal."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class Signal(Generic[T]):
    """Notify registered callbacks with a single payload."""

    def __init__(self) -> None:
        self._handlers: List[Callable[[T], None]] = []

    def connect(self, handler: Callable[[T], None]) -> Callable[[], None]:
        """Register ``handler`` and return a function that unregisters it."""
        self._handlers.append(handler)

        def disconnect() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return disconnect

    def emit(self, payload: T) -> None:
        for handler in list(self._handlers):
            handler(payload)

    def __len__(self) -> int:
        return len(self._handlers)


class ChangeKind(enum.Enum):
    ADD = "add"
    RESET = "reset"


@dataclass(frozen=True)
class CollectionChange(Generic[T]):
    kind: ChangeKind
    index: Optional[int] = None
    item: Optional[T] = None


class ObservableCollection(Generic[T]):
    """Append-only sequence that reports every add and reset to subscribers.

    Indices only grow between resets. Mutate it from the event loop thread
    only.
    """

    def __init__(self) -> None:
        self._items: List[T] = []
        self.changed: Signal[CollectionChange[T]] = Signal()

    def append(self, item: T) -> int:
        index = len(self._items)
        self._items.append(item)
        self.changed.emit(CollectionChange(ChangeKind.ADD, index=index, item=item))
        return index

    def reset(self) -> None:
        self._items.clear()
        self.changed.emit(CollectionChange(ChangeKind.RESET))

    def subscribe(self, handler: Callable[[CollectionChange[T]], None]) -> Callable[[], None]:
        return self.changed.connect(handler)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))
