from __future__ import annotations
from bisect import bisect_right
from dataclasses import dataclass
import logging
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .index_map import Interval, U64_END

logger = logging.getLogger(__name__)

Triple = Tuple[int, int, int]

class ConfigurationError(ValueError):
    """Stage data violates the construction contract (bad triple, overlap, overflow)."""

@dataclass(frozen=True)
class RangeEntry:
    """Maps [source_start, source_start + length) onto
    [destination_start, destination_start + length) by a constant offset.
    """
    destination_start: int
    source_start: int
    length: int

    def __post_init__(self):
        for name in ("destination_start", "source_start", "length"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
                raise ConfigurationError(f"{name} must be an integer, got {v!r}")
            object.__setattr__(self, name, int(v))
            if v < 0:
                raise ConfigurationError(f"{name} must be non-negative, got {v}")
        if self.length == 0:
            raise ConfigurationError("entry length must be positive")
        if self.source_end > U64_END or self.destination_end > U64_END:
            raise ConfigurationError(f"entry {self.as_triple()} overflows the 64-bit domain")

    @staticmethod
    def from_triple(triple: Sequence[int]) -> "RangeEntry":
        if len(triple) != 3:
            raise ConfigurationError(f"expected (destination, source, length), got {tuple(triple)!r}")
        d, s, n = triple
        return RangeEntry(d, s, n)

    @property
    def source_end(self) -> int:
        return self.source_start + self.length

    @property
    def destination_end(self) -> int:
        return self.destination_start + self.length

    @property
    def offset(self) -> int:
        return self.destination_start - self.source_start

    def as_triple(self) -> Triple:
        return (self.destination_start, self.source_start, self.length)

class RangeMap:
    """One stage: disjoint source intervals, identity for everything else."""

    def __init__(self, entries: Iterable[RangeEntry], name: str = ""):
        self.name = name
        self.entries: Tuple[RangeEntry, ...] = tuple(sorted(entries, key=lambda e: e.source_start))
        self._check_disjoint()
        # bisect keys
        self._starts = [e.source_start for e in self.entries]
        self._ends = [e.source_end for e in self.entries]
        logger.debug("stage %r: %d entries", name, len(self.entries))

    @staticmethod
    def from_triples(triples: Iterable[Sequence[int]], name: str = "") -> "RangeMap":
        return RangeMap([RangeEntry.from_triple(t) for t in triples], name=name)

    def _check_disjoint(self):
        for prev, cur in zip(self.entries, self.entries[1:]):
            if cur.source_start < prev.source_end:
                raise ConfigurationError(
                    f"stage {self.name!r}: source ranges of {prev.as_triple()} and {cur.as_triple()} overlap"
                )

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"RangeMap(name={self.name!r}, entries={len(self.entries)})"

    def map_value(self, value: int) -> int:
        """Image of a single value: a length-1 interval through map_interval."""
        return self.map_interval(Interval(value, 1))[0].start

    def map_interval(self, interval: Interval) -> List[Interval]:
        """Image of `interval` as a list of intervals in source order.
        Covered pieces are shifted by their entry's offset; gaps pass through unchanged.
        The output lengths always sum to interval.length.
        """
        start, end = interval.start, interval.end
        out = []
        cur = start
        # first entry whose source range ends after `start`
        i = bisect_right(self._ends, start)
        while i < len(self.entries):
            e = self.entries[i]
            if e.source_start >= end:
                break
            lo = max(start, e.source_start)
            hi = min(end, e.source_end)
            if cur < lo:
                out.append(Interval.from_bounds(cur, lo))
            out.append(Interval.from_bounds(lo + e.offset, hi + e.offset))
            cur = hi
            i += 1
        if cur < end:
            out.append(Interval.from_bounds(cur, end))
        return out

    def map_values(self, values) -> np.ndarray:
        """Vectorized map_value over a uint64 array."""
        v = np.asarray(values, dtype=np.uint64)
        out = v.copy()
        if not self.entries or not v.size:
            return out
        src = np.array(self._starts, dtype=np.uint64)
        dst = np.array([e.destination_start for e in self.entries], dtype=np.uint64)
        last = np.array([e.length - 1 for e in self.entries], dtype=np.uint64)
        idx = np.searchsorted(src, v, side="right").astype(np.int64) - 1
        below = idx < 0
        idx[below] = 0
        delta = v - src[idx]
        hit = ~below & (v >= src[idx]) & (delta <= last[idx])
        out[hit] = dst[idx[hit]] + delta[hit]
        return out
