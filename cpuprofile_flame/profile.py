"""
profile.py

Canonical flat-sample profile model: an ordered list of (stack, weight)
samples plus the value formatter used to display weights.
"""

from dataclasses import dataclass
from typing import Iterator, Sequence


@dataclass(eq=False)
class FrameInfo:
    """Describes one canonical frame. Instances are compared by identity."""

    key: str
    name: str
    file: str = ""
    line: int = 0
    col: int = 0


class RawValueFormatter:
    unit = "none"

    def format(self, value) -> str:
        if float(value).is_integer():
            return f"{int(value)}"
        return f"{value:.2f}"


class TimeFormatter:
    """Formats durations stored in ``unit`` with a human-friendly scale."""

    _MULTIPLIERS = {
        "nanoseconds": 1e-9,
        "microseconds": 1e-6,
        "milliseconds": 1e-3,
        "seconds": 1.0,
    }

    def __init__(self, unit: str):
        if unit not in self._MULTIPLIERS:
            raise ValueError(f"Unknown time unit {unit!r}")
        self.unit = unit
        self._multiplier = self._MULTIPLIERS[unit]

    def format(self, value) -> str:
        # V8 time deltas can be negative; the scale follows the magnitude
        sign = "-" if value < 0 else ""
        seconds = abs(value) * self._multiplier
        if seconds >= 60:
            minutes = int(seconds // 60)
            return f"{sign}{minutes}:{int(seconds % 60):02d}"
        if seconds >= 1:
            return f"{sign}{seconds:.2f}s"
        if seconds * 1e3 >= 1:
            return f"{sign}{seconds * 1e3:.2f}ms"
        if seconds * 1e6 >= 1:
            return f"{sign}{seconds * 1e6:.2f}µs"
        return f"{sign}{seconds * 1e9:.2f}ns"


class Profile:
    def __init__(self, total_weight=0):
        self.total_weight = total_weight
        self.name = ""
        self.samples: list[list[FrameInfo]] = []
        self.weights: list = []
        self.value_formatter = RawValueFormatter()

    def set_name(self, name: str):
        self.name = name

    def append_sample(self, stack: Sequence[FrameInfo], weight):
        """Append one sample; ``stack`` is ordered root-first, leaf-last."""
        self.samples.append(list(stack))
        self.weights.append(weight)

    def set_value_formatter(self, formatter):
        self.value_formatter = formatter

    def format_value(self, value) -> str:
        return self.value_formatter.format(value)

    def get_total_weight(self):
        return self.total_weight

    def get_sample_weight(self):
        return sum(self.weights)

    @property
    def sample_count(self) -> int:
        return len(self.samples)

    def iter_samples(self) -> Iterator[tuple[list[FrameInfo], float]]:
        return zip(self.samples, self.weights)

    def frames(self) -> list[FrameInfo]:
        """Unique frames in order of first appearance."""
        seen = set()
        frames = []
        for stack in self.samples:
            for frame in stack:
                if id(frame) in seen:
                    continue
                seen.add(id(frame))
                frames.append(frame)
        return frames
