from __future__ import annotations

from typing import Any, List, Tuple

import pytest

from blockfall.game import EventBus, GameConfig, GameEvent, GameState, TetrominoType


class FixedRng:
    """Stands in for random.Random so every spawn yields the same kind."""

    def __init__(self, kind: TetrominoType) -> None:
        self.kind = kind

    def choice(self, seq):
        return self.kind

    def seed(self, value) -> None:
        pass


class Recorder:
    def __init__(self, events: EventBus) -> None:
        self.calls: List[Tuple[GameEvent, Tuple[Any, ...]]] = []
        for event in GameEvent:
            events.subscribe(event, self._make(event))

    def _make(self, event: GameEvent):
        def listener(*payload: Any) -> None:
            self.calls.append((event, payload))
        return listener

    def of(self, event: GameEvent) -> List[Tuple[Any, ...]]:
        return [payload for ev, payload in self.calls if ev is event]

    def clear(self) -> None:
        self.calls.clear()


@pytest.fixture
def make_game():
    """Build a game whose spawns are all ``kind``, with an event recorder attached."""

    def _make(kind: TetrominoType = TetrominoType.O, **config):
        config.setdefault("random_seed", 7)
        game = GameState(GameConfig(**config))
        game.rng = FixedRng(kind)
        game.request_new_game()
        recorder = Recorder(game.events)
        return game, recorder

    return _make
