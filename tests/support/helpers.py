import asyncio
from datetime import datetime, timedelta

START = datetime(2024, 1, 1, 12, 0, 0)


class FakeClock:
    """Deterministic clock: every call returns a time one second later."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)):
        self.current = start - step
        self.step = step

    def __call__(self) -> datetime:
        self.current += self.step
        return self.current


def run(coro):
    """Drive an async service call to completion."""
    return asyncio.run(coro)
