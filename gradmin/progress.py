"""Iteration-progress sinks and the run clock.

Minimizers write one tab-separated row per iteration: iteration index,
elapsed seconds, current function value, improvement, forecast start
distance and accepted step length. The sink never influences the run.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional, TextIO

from .forecaster import check_start_distance
from .logging import get_logger

if TYPE_CHECKING:
    from .core import Array
    from .forecaster import StartDistanceForecaster
    from .termination import TerminationCondition

logger = get_logger(__name__)

HEADER = "iteration\ttime\tf(x)\tdelta\tstart distance\tlinesearch"


class ProgressSink(ABC):
    """Append-only, line-oriented text sink."""

    @abstractmethod
    def write_line(self, line: str) -> None:
        """Append one line."""


class NullSink(ProgressSink):
    """Discards everything."""

    def write_line(self, line: str) -> None:
        del line


class StreamSink(ProgressSink):
    """Writes lines to a text stream such as ``sys.stdout`` or a file."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def write_line(self, line: str) -> None:
        self.stream.write(line + "\n")


class LoggerSink(ProgressSink):
    """Forwards lines to a :class:`logging.Logger`."""

    def __init__(self, logger: logging.Logger, level: int = logging.INFO) -> None:
        self.logger = logger
        self.level = level

    def write_line(self, line: str) -> None:
        self.logger.log(self.level, line)


def as_sink(out: Optional[Any]) -> ProgressSink:
    """Turn ``None``, a sink or a writable stream into a :class:`ProgressSink`."""
    if out is None:
        return NullSink()
    if isinstance(out, ProgressSink):
        return out
    if hasattr(out, "write"):
        return StreamSink(out)
    raise TypeError(f"Cannot write progress to {type(out).__name__}.")


class Stopwatch:
    """Elapsed wall-clock time since construction (or the last restart)."""

    def __init__(self) -> None:
        self._start = time.perf_counter()

    def restart(self) -> None:
        self._start = time.perf_counter()

    def elapsed(self) -> float:
        return time.perf_counter() - self._start


def format_row(
    iteration: int,
    elapsed: float,
    value: float,
    delta: float,
    start_distance: float,
    step: float,
) -> str:
    """Format one progress row."""
    return "\t".join(
        [
            str(iteration),
            f"{elapsed:.6g}",
            repr(float(value)),
            repr(float(delta)),
            repr(float(start_distance)),
            repr(float(step)),
        ]
    )


class IterationMonitor:
    """Bookkeeping shared by all minimizers of one run.

    Owns the sink and the clock, queries the termination condition with the
    elapsed time, validates forecasts and reports accepted steps back to the
    forecaster.
    """

    def __init__(
        self,
        termination: "TerminationCondition",
        forecaster: "StartDistanceForecaster",
        out: Optional[Any] = None,
        clock: Optional[Stopwatch] = None,
    ) -> None:
        self.termination = termination
        self.forecaster = forecaster
        self.sink = as_sink(out)
        self.clock = clock if clock is not None else Stopwatch()

    def start(self, value: float) -> None:
        self.sink.write_line(HEADER)
        self.sink.write_line(f"0\t0\t{float(value)!r}\t0")
        logger.debug("start value %r", value)

    def should_continue(
        self,
        iteration: int,
        f_last: float,
        f_current: float,
        gradient: "Array",
        direction: "Array",
        alpha: float,
    ) -> bool:
        return bool(
            self.termination.should_continue(
                iteration, f_last, f_current, gradient, direction, alpha, self.clock.elapsed()
            )
        )

    def start_distance(self) -> float:
        return check_start_distance(self.forecaster.next_start_distance())

    def record(
        self, iteration: int, f_last: float, f_current: float, start_distance: float, step: float
    ) -> None:
        elapsed = self.clock.elapsed()
        self.sink.write_line(
            format_row(iteration, elapsed, f_current, f_last - f_current, start_distance, step)
        )
        logger.debug(
            "iteration %d: f=%r delta=%r start=%r step=%r",
            iteration,
            f_current,
            f_last - f_current,
            start_distance,
            step,
        )
        self.forecaster.record_last_distance(step)


__all__ = [
    "HEADER",
    "IterationMonitor",
    "LoggerSink",
    "NullSink",
    "ProgressSink",
    "Stopwatch",
    "StreamSink",
    "as_sink",
    "format_row",
]
