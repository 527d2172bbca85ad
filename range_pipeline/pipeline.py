from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .config import PipelineConfig
from .index_map import Interval, merge_intervals, min_start
from .range_map import RangeMap

logger = logging.getLogger(__name__)

@dataclass
class PipelineResult:
    seeds: List[int]
    locations: List[int]            # seeds after every stage
    seed_ranges: List[Interval]
    final_intervals: List[Interval] # seed_ranges after every stage
    # (stage name, working set after that stage); first row is the input set
    trace: List[Tuple[str, List[Interval]]] = field(default_factory=list)

    @property
    def lowest_location_seeds(self) -> Optional[int]:
        return min(self.locations) if self.locations else None

    @property
    def lowest_location_ranges(self) -> Optional[int]:
        return min_start(self.final_intervals)

class Pipeline:
    """Ordered RangeMap stages applied one after another."""

    def __init__(self, stages: Iterable[RangeMap], config: Optional[PipelineConfig] = None):
        self.stages: Tuple[RangeMap, ...] = tuple(stages)
        self.cfg = config or PipelineConfig()

    @staticmethod
    def from_triples(
        stage_triples: Sequence[Iterable[Sequence[int]]],
        names: Optional[Sequence[str]] = None,
        config: Optional[PipelineConfig] = None,
    ) -> "Pipeline":
        cfg = config or PipelineConfig()
        names = list(names) if names is not None else [f"stage-{i}" for i in range(len(stage_triples))]
        if len(names) != len(stage_triples):
            raise ValueError(f"{len(names)} names for {len(stage_triples)} stages")
        stages = [
            RangeMap.from_triples(triples, name=name)
            for name, triples in zip(names, stage_triples)
        ]
        return Pipeline(stages, cfg)

    def __len__(self) -> int:
        return len(self.stages)

    def map_scalar(self, value: int) -> int:
        for stage in self.stages:
            value = stage.map_value(value)
        return value

    def map_scalars(self, values) -> np.ndarray:
        """Batch map_scalar over a uint64 array."""
        out = np.asarray(values, dtype=np.uint64)
        for stage in self.stages:
            out = stage.map_values(out)
        return out

    def _step(self, stage: RangeMap, current: List[Interval]) -> List[Interval]:
        nxt = [piece for iv in current for piece in stage.map_interval(iv)]
        if self.cfg.merge_between_stages:
            nxt = merge_intervals(nxt)
        return nxt

    def map_intervals(self, inputs: Iterable[Interval]) -> List[Interval]:
        """Image of every input interval after the last stage.
        Overlapping or adjacent outputs are kept apart unless merge_between_stages is set.
        """
        current = list(inputs)
        for stage in self.stages:
            current = self._step(stage, current)
        return current

    def trace_intervals(self, inputs: Iterable[Interval]) -> List[Tuple[str, List[Interval]]]:
        current = list(inputs)
        rows = [("input", current)]
        for stage in self.stages:
            current = self._step(stage, current)
            logger.debug("%s: %d intervals", stage.name, len(current))
            rows.append((stage.name, current))
        return rows

    def run(self, seeds: Sequence[int], seed_ranges: Sequence[Interval]) -> PipelineResult:
        locations = [int(x) for x in self.map_scalars(list(seeds))] if len(seeds) else []
        if self.cfg.keep_trace:
            trace = self.trace_intervals(seed_ranges)
            final = trace[-1][1]
        else:
            trace = []
            final = self.map_intervals(seed_ranges)
        logger.debug(
            "%d seeds, %d ranges -> %d intervals over %d stages",
            len(locations), len(seed_ranges), len(final), len(self.stages),
        )
        return PipelineResult(
            seeds=[int(s) for s in seeds],
            locations=locations,
            seed_ranges=list(seed_ranges),
            final_intervals=final,
            trace=trace,
        )
