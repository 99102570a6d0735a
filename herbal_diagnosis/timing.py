"""
Name: Timing Utilities

Responsibilities:
  - Measure elapsed time of pipeline stages (prepare, llm, parse)
  - Report total processing time in whole milliseconds for chain metadata

Collaborators:
  - application/diagnosis_chain.py, application/chat_chain.py

Notes:
  - Use as context manager: with Timer() as t: ... t.elapsed_ms
"""

import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Timer:
    """
    R: Simple timer for measuring elapsed time.

    Usage:
        with Timer() as t:
            ...
        print(t.elapsed_ms)
    """

    _start_time: Optional[float] = field(default=None, repr=False)
    _end_time: Optional[float] = field(default=None, repr=False)

    def start(self) -> "Timer":
        self._start_time = time.perf_counter()
        self._end_time = None
        return self

    def stop(self) -> "Timer":
        if self._start_time is None:
            raise RuntimeError("Timer was not started")
        self._end_time = time.perf_counter()
        return self

    @property
    def elapsed_seconds(self) -> float:
        if self._start_time is None:
            return 0.0
        end = self._end_time or time.perf_counter()
        return end - self._start_time

    @property
    def elapsed_ms(self) -> float:
        return round(self.elapsed_seconds * 1000, 2)

    def __enter__(self) -> "Timer":
        return self.start()

    def __exit__(self, *args) -> None:
        self.stop()


@dataclass
class StageTimings:
    """
    R: Container for multi-stage timing measurements.

    Usage:
        timings = StageTimings()
        with timings.measure("llm"):
            response = llm.invoke(...)
        timings.to_dict()  # {"llm_ms": 812.4, "total_ms": 815.0}
    """

    _stages: dict[str, float] = field(default_factory=dict)
    _total_timer: Timer = field(default_factory=Timer)

    def __post_init__(self):
        self._total_timer.start()

    def measure(self, stage_name: str) -> "_StageTimer":
        return _StageTimer(stage_name, self)

    def record(self, stage_name: str, elapsed_ms: float) -> None:
        self._stages[stage_name] = elapsed_ms

    @property
    def total_ms(self) -> int:
        """R: Elapsed time since creation, whole milliseconds."""
        return int(self._total_timer.elapsed_seconds * 1000)

    def to_dict(self) -> dict[str, float]:
        result = {f"{name}_ms": ms for name, ms in self._stages.items()}
        result["total_ms"] = self._total_timer.elapsed_ms
        return result


class _StageTimer(Timer):
    """R: Timer that records into its parent StageTimings on exit."""

    def __init__(self, stage_name: str, parent: StageTimings):
        super().__init__()
        self._stage_name = stage_name
        self._parent = parent

    def __exit__(self, *args) -> None:
        super().__exit__(*args)
        self._parent.record(self._stage_name, self.elapsed_ms)
