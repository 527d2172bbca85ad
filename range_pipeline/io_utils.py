from __future__ import annotations
from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from .config import PipelineConfig
from .index_map import Interval, U64_MAX, intervals_from_pairs
from .pipeline import Pipeline
from .range_map import ConfigurationError, RangeEntry, RangeMap

logger = logging.getLogger(__name__)

SEEDS_PREFIX = "seeds:"
MAP_SUFFIX = "map:"

@dataclass
class Almanac:
    seeds: List[int] = field(default_factory=list)
    stages: List[RangeMap] = field(default_factory=list)

    def seed_ranges(self) -> List[Interval]:
        """Seeds read as `start length` pairs."""
        try:
            return intervals_from_pairs(self.seeds)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

    def to_pipeline(self, config: Optional[PipelineConfig] = None) -> Pipeline:
        return Pipeline(self.stages, config)

def _parse_ints(text: str, lineno: int) -> List[int]:
    try:
        return [int(tok) for tok in text.split()]
    except ValueError:
        raise ConfigurationError(f"line {lineno}: expected integers, got {text.strip()!r}") from None

def parse_almanac(text: str) -> Almanac:
    """Parse a `seeds:` line followed by blank-line separated `<name> map:` blocks
    of `destination source length` rows.
    """
    seeds: List[int] = []
    blocks: List[tuple] = []  # (name, [RangeEntry])
    current = None
    for lineno, raw in enumerate(text.splitlines(), start=1):
        ln = raw.strip()
        if not ln:
            current = None
            continue
        if ln.startswith(SEEDS_PREFIX):
            if blocks:
                raise ConfigurationError(f"line {lineno}: seeds must precede the map blocks")
            seeds = _parse_ints(ln[len(SEEDS_PREFIX):], lineno)
            if any(s < 0 or s > U64_MAX for s in seeds):
                raise ConfigurationError(f"line {lineno}: seeds must fit the unsigned 64-bit domain")
            continue
        if ln.endswith(MAP_SUFFIX):
            current = (ln[: -len(MAP_SUFFIX)].strip(), [])
            blocks.append(current)
            continue
        if current is None:
            raise ConfigurationError(f"line {lineno}: data row outside a map block")
        vals = _parse_ints(ln, lineno)
        if len(vals) != 3:
            raise ConfigurationError(f"line {lineno}: expected 3 integers, got {len(vals)}")
        try:
            current[1].append(RangeEntry(*vals))
        except ConfigurationError as exc:
            raise ConfigurationError(f"line {lineno}: {exc}") from None

    stages = [RangeMap(entries, name=name) for name, entries in blocks]
    logger.debug("parsed %d seeds and %d stages", len(seeds), len(stages))
    return Almanac(seeds=seeds, stages=stages)

def load_almanac(path: Union[str, Path]) -> Almanac:
    return parse_almanac(Path(path).read_text(encoding="utf-8"))

def save_intervals_json(spans: List[Interval], path: Union[str, Path]):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([[iv.start, iv.length] for iv in spans], f, ensure_ascii=False, indent=2)

def save_summary_json(summary: Dict, path: Union[str, Path]):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Path(path).write_text(json.dumps(summary, indent=2, ensure_ascii=False), encoding="utf-8")
