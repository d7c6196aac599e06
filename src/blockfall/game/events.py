from __future__ import annotations

import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, List


logger = logging.getLogger(__name__)


class GameEvent(str, Enum):
    """Notifications emitted by the game, with the payload each carries."""

    SPAWNED = "spawned"  # (piece)
    MOVED = "moved"  # (dx, dy)
    ROTATED = "rotated"  # (delta)
    HARD_DROPPED = "hard_dropped"  # (distance)
    LOCKED = "locked"  # (cells)
    LINES_CLEARED = "lines_cleared"  # (count, rows)
    SCORE_CHANGED = "score_changed"  # (score)
    LEVEL_CHANGED = "level_changed"  # (level)
    PAUSED = "paused"  # (paused)
    MUTED = "muted"  # (muted)
    NEW_GAME = "new_game"  # ()
    GAME_OVER = "game_over"  # (score, lines, level)


Listener = Callable[..., Any]


class EventBus:
    """Synchronous publish/subscribe hub.

    A listener that raises is logged and skipped; the remaining listeners
    still run and the error never reaches the publisher.
    """

    def __init__(self) -> None:
        self._listeners: Dict[GameEvent, List[Listener]] = defaultdict(list)

    def subscribe(self, event: GameEvent, listener: Listener) -> Callable[[], None]:
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

        return unsubscribe

    def emit(self, event: GameEvent, *payload: Any) -> None:
        for listener in list(self._listeners[event]):
            try:
                listener(*payload)
            except Exception:
                logger.exception("Listener %r failed while handling %s", listener, event.value)

    def listener_count(self, event: GameEvent) -> int:
        return len(self._listeners[event])
