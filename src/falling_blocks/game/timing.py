from __future__ import annotations

import logging
from typing import Optional

from .core import FallingBlocksGame, GameState

logger = logging.getLogger(__name__)


class GameClock:
    """Drives gravity and the line-clear delay from a millisecond clock.

    The owner calls ``sync(now_ms)`` right after every command it sends to the
    game and ``advance(now_ms)`` once per frame. At most one timer is pending
    at a time: the fall tick while the game is active, the clear delay while
    rows are being cleared. Both start at the lock or spawn that caused them.
    """

    def __init__(self, game: FallingBlocksGame, now_ms: int = 0) -> None:
        self.game = game
        self._fall_due: Optional[int] = None
        self._clear_due: Optional[int] = None
        self._spawn_seen = game.spawn_count
        self._schedule_fall(now_ms)

    @property
    def fall_pending(self) -> bool:
        return self._fall_due is not None

    @property
    def clear_pending(self) -> bool:
        return self._clear_due is not None

    def _schedule_fall(self, now_ms: int) -> None:
        if self.game.state is GameState.ACTIVE:
            self._fall_due = now_ms + self.game.speed
        else:
            self._fall_due = None

    def cancel(self) -> None:
        """Drop the pending fall tick. The next ``advance`` reschedules it."""
        self._fall_due = None

    def sync(self, now_ms: int) -> None:
        """Start timers for a lock or spawn that happened at ``now_ms``."""
        if self.game.state is GameState.CLEARING:
            self._fall_due = None
            if self._clear_due is None:
                self._clear_due = now_ms + self.game.config.clear_delay_ms
            return
        self._clear_due = None
        if self.game.spawn_count != self._spawn_seen:
            self._spawn_seen = self.game.spawn_count
            self._schedule_fall(now_ms)

    def advance(self, now_ms: int) -> int:
        """Fire due timers. Returns the number of soft drops issued."""
        self.sync(now_ms)
        state = self.game.state
        if state is GameState.CLEARING:
            if self._clear_due is not None and now_ms >= self._clear_due:
                self._clear_due = None
                level = self.game.level
                self.game.finish_clearing()
                if self.game.level != level:
                    logger.debug("fall speed now %d ms", self.game.speed)
                self.sync(now_ms)
            return 0
        if state is not GameState.ACTIVE:
            self._fall_due = None
            return 0
        if self._fall_due is None:
            self._schedule_fall(now_ms)
            return 0
        if now_ms < self._fall_due:
            return 0
        self.game.soft_drop()
        self._schedule_fall(now_ms)
        self.sync(now_ms)
        return 1
