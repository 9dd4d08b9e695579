"""Staggered fade and slide reveal for items appended to a collection."""

from __future__ import annotations

import asyncio
import enum
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Set, Tuple

from .collection import ChangeKind, CollectionChange, ObservableCollection
from .config import DEFAULT_ANIMATION_DURATION, DEFAULT_ITEM_INTERVAL

logger = logging.getLogger("scraping_viewer")


def exponential_ease_in(progress: float, exponent: float) -> float:
    """Exponential ease-in curve mapping ``[0, 1]`` onto ``[0, 1]``."""
    progress = min(max(progress, 0.0), 1.0)
    if exponent == 0:
        return progress
    return math.expm1(exponent * progress) / math.expm1(exponent)


@dataclass(frozen=True)
class Track:
    """One animated property moving from ``start`` to ``end``."""

    name: str
    start: float
    end: float
    exponent: float

    def value_at(self, progress: float) -> float:
        return self.start + (self.end - self.start) * exponential_ease_in(progress, self.exponent)


DEFAULT_TRACKS: Tuple[Track, ...] = (
    Track("opacity", 0.0, 1.0, 10.0),
    Track("offset_x", 100.0, 0.0, 5.0),
)


@dataclass(frozen=True)
class Animation:
    """A scheduled transition for a single revealed item."""

    item: Any
    position: int
    delay: float
    duration: float
    tracks: Tuple[Track, ...] = DEFAULT_TRACKS

    def progress(self, elapsed: float) -> float:
        if self.duration <= 0:
            return 1.0 if elapsed >= self.delay else 0.0
        return min(max((elapsed - self.delay) / self.duration, 0.0), 1.0)

    def sample(self, elapsed: float) -> Dict[str, float]:
        """Property values ``elapsed`` seconds after the batch was dispatched."""
        progress = self.progress(elapsed)
        return {track.name: track.value_at(progress) for track in self.tracks}

    def finished(self, elapsed: float) -> bool:
        return elapsed >= self.delay + self.duration


class Presenter(Protocol):
    """Surface that shows revealed items."""

    def hide(self, item: Any) -> None:
        ...

    def animate(self, animation: Animation) -> None:
        ...


class RevealState(enum.Enum):
    IDLE = "idle"
    BATCHING = "batching"


class RevealAnimator:
    """Batch appended items and hand them to a presenter with staggered delays.

    Items appended during one loop iteration form a batch. On the next
    iteration each gets an animation starting ``interval * position`` seconds
    in. A reset drops the batch and any scheduled dispatch.
    """

    def __init__(
        self,
        collection: ObservableCollection,
        presenter: Presenter,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        interval: float = DEFAULT_ITEM_INTERVAL,
        duration: float = DEFAULT_ANIMATION_DURATION,
        tracks: Sequence[Track] = DEFAULT_TRACKS,
    ) -> None:
        self.interval = interval
        self.duration = duration
        self.tracks = tuple(tracks)
        self._presenter = presenter
        self._loop = loop
        self._pending: List[Any] = []
        self._handle: Optional[asyncio.Handle] = None
        self._disconnect = collection.subscribe(self._on_changed)

    @property
    def state(self) -> RevealState:
        return RevealState.BATCHING if self._pending else RevealState.IDLE

    @property
    def pending(self) -> Tuple[Any, ...]:
        return tuple(self._pending)

    def _on_changed(self, change: CollectionChange) -> None:
        if change.kind is ChangeKind.RESET:
            self._discard()
        elif change.kind is ChangeKind.ADD:
            self._enqueue(change.item)

    def _enqueue(self, item: Any) -> None:
        self._presenter.hide(item)
        self._pending.append(item)
        if self._handle is None:
            loop = self._loop or asyncio.get_running_loop()
            self._handle = loop.call_soon(self._dispatch)

    def _discard(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._pending:
            logger.debug("Dropping %d pending reveals", len(self._pending))
        self._pending.clear()

    def _dispatch(self) -> List[Animation]:
        self._handle = None
        batch, self._pending = self._pending, []
        animations = [
            Animation(
                item=item,
                position=position,
                delay=self.interval * position,
                duration=self.duration,
                tracks=self.tracks,
            )
            for position, item in enumerate(batch)
        ]
        for animation in animations:
            self._presenter.animate(animation)
        return animations

    def flush(self) -> List[Animation]:
        """Dispatch the pending batch now instead of on the next iteration."""
        if self._handle is not None:
            self._handle.cancel()
        return self._dispatch()

    def close(self) -> None:
        self._disconnect()
        self._discard()


Renderer = Callable[[Any, Dict[str, float]], None]


class AnimationPlayer:
    """Presenter that plays every animation as its own asyncio task.

    ``render`` receives the item and the current property values once per
    frame. Running animations never interfere since each targets its own item.
    """

    def __init__(
        self,
        render: Renderer,
        *,
        frame_rate: int = 30,
        tracks: Sequence[Track] = DEFAULT_TRACKS,
    ) -> None:
        self._render = render
        self._frame_interval = 1.0 / max(frame_rate, 1)
        self._hidden = {track.name: track.start for track in tracks}
        self._tasks: Set[asyncio.Task] = set()

    @property
    def running(self) -> int:
        return len(self._tasks)

    def hide(self, item: Any) -> None:
        self._render(item, dict(self._hidden))

    def animate(self, animation: Animation) -> None:
        task = asyncio.get_running_loop().create_task(self._play(animation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _play(self, animation: Animation) -> None:
        loop = asyncio.get_running_loop()
        started = loop.time()
        if animation.delay > 0:
            await asyncio.sleep(animation.delay)
        while True:
            elapsed = loop.time() - started
            self._render(animation.item, animation.sample(elapsed))
            if animation.finished(elapsed):
                break
            await asyncio.sleep(self._frame_interval)

    async def wait(self) -> None:
        """Wait until every animation started so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
