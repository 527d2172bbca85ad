from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np

U64_MAX = int(np.iinfo(np.uint64).max)
# exclusive upper bound of the value domain
U64_END = U64_MAX + 1

@dataclass(frozen=True, order=True)
class Interval:
    """Half-open integer interval [start, start + length)."""
    start: int
    length: int

    def __post_init__(self):
        for name in ("start", "length"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
                raise ValueError(f"interval {name} must be an integer, got {v!r}")
            # numpy scalars would wrap on start + length
            object.__setattr__(self, name, int(v))
        if self.start < 0:
            raise ValueError(f"interval start must be non-negative, got {self.start}")
        if self.length <= 0:
            raise ValueError(f"interval length must be positive, got {self.length}")
        if self.start + self.length > U64_END:
            raise ValueError(f"interval [{self.start}, {self.start + self.length}) leaves the 64-bit domain")

    @property
    def end(self) -> int:
        return self.start + self.length

    @staticmethod
    def from_bounds(start: int, end: int) -> "Interval":
        return Interval(start, end - start)

def intervals_from_pairs(values: Sequence[int]) -> List[Interval]:
    """Pair a flat `start, length, start, length, ...` sequence into intervals.
    Zero-length pairs are dropped.
    """
    if len(values) % 2:
        raise ValueError(f"expected start/length pairs, got {len(values)} values")
    out = []
    for s, n in zip(values[0::2], values[1::2]):
        if n == 0:
            continue
        out.append(Interval(s, n))
    return out

def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """Sort and coalesce overlapping or touching intervals."""
    xs = sorted(intervals)
    if not xs:
        return []
    merged = []
    cs, ce = xs[0].start, xs[0].end
    for iv in xs[1:]:
        if iv.start <= ce:
            ce = max(ce, iv.end)
        else:
            merged.append(Interval.from_bounds(cs, ce))
            cs, ce = iv.start, iv.end
    merged.append(Interval.from_bounds(cs, ce))
    return merged

def total_length(intervals: Iterable[Interval]) -> int:
    return sum(iv.length for iv in intervals)

def min_start(intervals: Iterable[Interval]) -> Optional[int]:
    starts = [iv.start for iv in intervals]
    return min(starts) if starts else None
