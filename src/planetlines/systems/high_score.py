from __future__ import annotations

import logging
from typing import Protocol

from planetlines.events.bus import EVENT_GAME_OVER, EVENT_HIGH_SCORE_RECORDED, EventBus

logger = logging.getLogger(__name__)


class HighScoreStore(Protocol):
    """Persistence collaborator owned by the presentation layer."""

    def load_high_score(self) -> int:
        ...

    def save_high_score(self, score: int) -> None:
        ...


class InMemoryHighScoreStore:
    def __init__(self, initial: int = 0):
        self._best = initial

    def load_high_score(self) -> int:
        return self._best

    def save_high_score(self, score: int) -> None:
        self._best = score


class HighScoreSystem:
    """Records a new best score when the game ends.

    Listens for EVENT_GAME_OVER, compares final_score with the stored best
    and, when it is higher, saves it and emits EVENT_HIGH_SCORE_RECORDED.
    """
    def __init__(self, event_bus: EventBus, store: HighScoreStore | None = None):
        self.event_bus = event_bus
        self.store = store if store is not None else InMemoryHighScoreStore()
        self.new_high_score = False
        self.event_bus.subscribe(EVENT_GAME_OVER, self.on_game_over)

    @property
    def high_score(self) -> int:
        return self.store.load_high_score()

    def on_game_over(self, sender, **kwargs):
        final_score = kwargs.get('final_score')
        if final_score is None:
            return
        previous = self.store.load_high_score()
        if final_score <= previous:
            self.new_high_score = False
            return
        self.store.save_high_score(final_score)
        self.new_high_score = True
        logger.info("New high score %d (previous %d)", final_score, previous)
        self.event_bus.emit(EVENT_HIGH_SCORE_RECORDED, score=final_score, previous=previous)
