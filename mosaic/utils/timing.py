import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional


class StepTimer:
    """Collects named timing measurements in seconds.

    Use with the time_step() context manager to record durations. Each
    finished step is reported on ``logger`` at DEBUG when one is given.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._durations: Dict[str, float] = {}
        self._logger = logger

    @contextmanager
    def time_step(self, name: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start
            self._durations[name] = self._durations.get(name, 0.0) + duration
            if self._logger is not None:
                self._logger.debug("%s finished in %.3fs", name, duration)

    def get(self, name: str) -> Optional[float]:
        return self._durations.get(name)

    @property
    def total(self) -> float:
        return sum(self._durations.values())

    def to_lines(self) -> list[str]:
        lines: list[str] = []
        for key, seconds in self._durations.items():
            lines.append(f"{key}: {seconds:.3f}s")
        return lines
