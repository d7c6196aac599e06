from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from typing import List, Optional

from blockfall.game import EventBus, GameEvent


@dataclass
class HighScoreEntry:
    id: str
    score: int
    lines: int = 0
    level: int = 1
    timestamp: float = field(default_factory=time.time)


class HighScoreTable:
    """Best finished sessions, highest score first, capped at ``max_entries``."""

    def __init__(self, max_entries: int = 5) -> None:
        self.max_entries = max_entries
        self._entries: List[HighScoreEntry] = []
        self._ids = itertools.count(1)

    def attach(self, events: EventBus) -> None:
        events.subscribe(GameEvent.GAME_OVER, self.record)

    def record(self, score: int, lines: int = 0, level: int = 1,
               timestamp: Optional[float] = None) -> HighScoreEntry:
        ts = time.time() if timestamp is None else timestamp
        entry = HighScoreEntry(
            id=f"{int(ts * 1000)}-{next(self._ids)}",
            score=int(score),
            lines=int(lines),
            level=int(level),
            timestamp=ts,
        )
        self._entries.append(entry)
        # stable sort keeps earlier entries ahead on ties
        self._entries.sort(key=lambda e: e.score, reverse=True)
        del self._entries[self.max_entries:]
        return entry

    def top(self) -> List[HighScoreEntry]:
        return list(self._entries)

    def delete(self, entry_id: str) -> bool:
        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                del self._entries[i]
                return True
        return False

    def clear(self) -> None:
        self._entries.clear()

    def qualifies(self, score: int) -> bool:
        if len(self._entries) < self.max_entries:
            return True
        return score > self._entries[-1].score
