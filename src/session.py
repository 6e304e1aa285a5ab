# session.py
# Score keeping around one board engine.

import logging
import random
from typing import Optional

from board import BoardEngine, MoveOutcome, SettleOutcome
from core import EngineState

logger = logging.getLogger(__name__)

class GameSession:
    """Owns one BoardEngine and turns its outcomes into score and best score."""

    def __init__(self, width: int = 4, height: int = 4, initial_tiles: int = 2,
                 rng: Optional[random.Random] = None, best_score: int = 0):
        self.engine = BoardEngine(width, height, rng=rng)
        self.initial_tiles = initial_tiles
        self.score = 0
        self.best_score = best_score

    @property
    def game_over(self) -> bool:
        return self.engine.state == EngineState.GAME_OVER

    def new_game(self):
        self.score = 0
        self.engine.start(self.initial_tiles)

    def move(self, direction) -> MoveOutcome:
        outcome = self.engine.request_move(direction)
        if outcome.points:
            self._increase_score(outcome.points)
        return outcome

    def settle(self) -> SettleOutcome:
        outcome = self.engine.complete_settle()
        if outcome.game_over:
            logger.info("Game ended with score %d (best %d)", self.score, self.best_score)
        return outcome

    def _increase_score(self, points: int):
        self.score += points
        if self.score > self.best_score:
            self.best_score = self.score
