"""Shared fixtures: a manually driven event loop and seated players."""

import functools
import random

import pytest

from tresette.bots.base_bot import BotDifficulty
from tresette.bots.strategy_engine import BotStrategyEngine
from tresette.models.deal import Deal2v2
from tresette.models.player import BotPlayer, Player


class ManualHandle:
    """Timer handle returned by :class:`ManualLoop`."""

    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualLoop:
    """Deterministic stand-in for an event loop's ``call_later``.

    Timers only fire when the test asks for it, in due-time order.
    """

    def __init__(self):
        self.time = 0.0
        self._handles: list[ManualHandle] = []

    def call_later(self, delay, callback, *args):
        handle = ManualHandle(self.time + delay, functools.partial(callback, *args))
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> list[ManualHandle]:
        return [h for h in self._handles if not h.cancelled]

    def run_next(self) -> bool:
        """Fire the earliest pending timer; False when nothing is pending."""
        self._handles = self.pending
        if not self._handles:
            return False
        handle = min(self._handles, key=lambda h: h.when)
        self._handles.remove(handle)
        self.time = max(self.time, handle.when)
        handle.callback()
        return True

    def run_until_idle(self, max_steps: int = 10_000) -> int:
        """Fire timers until none is pending."""
        steps = 0
        while self.run_next():
            steps += 1
            if steps >= max_steps:
                msg = "Timers never settled"
                raise RuntimeError(msg)
        return steps


@pytest.fixture
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


@pytest.fixture
def manual_loop():
    """A fresh manually driven loop."""
    return ManualLoop()


def _bot(seat: int, seed: int) -> BotPlayer:
    strategy = BotStrategyEngine(BotDifficulty.HARD, rng=random.Random(seed))
    return BotPlayer(id=f"P{seat + 1}", username=f"Bot{seat + 1}", strategy=strategy)


@pytest.fixture
def human_and_bots():
    """Human P1 followed by three seeded bots."""
    return [Player(id="P1", username="Alice")] + [_bot(seat, seat) for seat in range(1, 4)]


@pytest.fixture
def all_bots():
    """Four seeded bots."""
    return [_bot(seat, seat * 7) for seat in range(4)]


@pytest.fixture
def human_leading_deal(manual_loop, human_and_bots):
    """Factory for a started deal in which the human leads the first trick."""

    def factory(**kwargs):
        for seed in range(200):
            deal = Deal2v2(
                0,
                human_and_bots,
                loop=manual_loop,
                rng=random.Random(seed),
                bot_move_delay=1.0,
                trick_resolution_delay=0.5,
                **kwargs,
            )
            deal.start()
            if deal.current_player is human_and_bots[0]:
                return deal
            deal.stop()
        pytest.fail("No seed gave the human the starting card")

    return factory
