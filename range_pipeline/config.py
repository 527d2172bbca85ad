from dataclasses import dataclass, field
from typing import Optional
import yaml

@dataclass
class OutputParams:
    output_dir: str = "outputs"
    write_intervals: bool = False   # dump the final interval set as JSON
    save_plots: bool = False

@dataclass
class PipelineConfig:
    merge_between_stages: bool = False  # coalesce the working set after every stage
    keep_trace: bool = False            # keep the working interval set of every stage
    log_level: str = "WARNING"
    output: OutputParams = field(default_factory=OutputParams)

def load_config_yaml(path: str, base: Optional[PipelineConfig] = None) -> PipelineConfig:
    """Load config from a YAML file into PipelineConfig dataclasses."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    def merge_dataclass(obj, values):
        for k, v in (values or {}).items():
            if hasattr(obj, k):
                setattr(obj, k, v)
        return obj

    defaults = base or PipelineConfig()
    output_cfg = merge_dataclass(
        OutputParams(**vars(defaults.output)), data.get("output")
    )

    cfg = PipelineConfig(
        merge_between_stages=bool(data.get("merge_between_stages", defaults.merge_between_stages)),
        keep_trace=bool(data.get("keep_trace", defaults.keep_trace)),
        log_level=str(data.get("log_level", defaults.log_level)).upper(),
        output=output_cfg,
    )
    return cfg
