from .config import OutputParams, PipelineConfig, load_config_yaml
from .index_map import (
    Interval, U64_MAX, intervals_from_pairs, merge_intervals, total_length, min_start
)
from .range_map import ConfigurationError, RangeEntry, RangeMap
from .pipeline import Pipeline, PipelineResult
from .plotting import plot_stage_intervals
from .io_utils import Almanac, parse_almanac, load_almanac, save_intervals_json, save_summary_json
