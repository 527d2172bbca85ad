#!/usr/bin/env python3
import argparse, json, logging
from pathlib import Path

from range_pipeline import (
    PipelineConfig, load_config_yaml, load_almanac, plot_stage_intervals,
    save_intervals_json, save_summary_json
)

logger = logging.getLogger(__name__)

def build_argparser():
    ap = argparse.ArgumentParser(description="Chained range-remapping pipeline")
    ap.add_argument("almanac", type=str, help="Text file with a seeds line and '<name> map:' blocks")
    ap.add_argument("--config", type=str, default="", help="YAML config file (optional)")
    ap.add_argument("--output-dir", type=str, default="", help="Directory to store results")
    ap.add_argument("--merge", action="store_true", help="Merge overlapping intervals between stages")
    ap.add_argument("--no-merge", action="store_true", help="Keep the exact interval set between stages")
    ap.add_argument("--plot", action="store_true", help="Show the per-stage interval plot")
    ap.add_argument("--save-plots", action="store_true", help="Save the plot as PNG in output-dir")
    ap.add_argument("--write-intervals", action="store_true", help="Save the final interval set as JSON")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap

def main(argv=None):
    args = build_argparser().parse_args(argv)

    if args.config:
        cfg = load_config_yaml(args.config)
    else:
        cfg = PipelineConfig()

    if args.merge:
        cfg.merge_between_stages = True
    if args.no_merge:
        cfg.merge_between_stages = False
    if args.output_dir:
        cfg.output.output_dir = args.output_dir
    if args.save_plots:
        cfg.output.save_plots = True
    if args.write_intervals:
        cfg.output.write_intervals = True
    if args.plot or cfg.output.save_plots:
        cfg.keep_trace = True

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, cfg.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    out_dir = Path(cfg.output.output_dir); out_dir.mkdir(parents=True, exist_ok=True)

    almanac = load_almanac(args.almanac)
    pipe = almanac.to_pipeline(cfg)
    res = pipe.run(almanac.seeds, almanac.seed_ranges())
    logger.info("mapped %d seeds through %d stages", len(res.seeds), len(pipe))

    if cfg.output.write_intervals:
        save_intervals_json(res.final_intervals, out_dir / "final_intervals.json")

    if cfg.output.save_plots or args.plot:
        plot_stage_intervals(
            res.trace,
            title="Seed ranges through every stage",
            show=args.plot,
            save_path=str(out_dir / "plot_stages.png") if cfg.output.save_plots else None
        )

    summary = {
        "stages": len(pipe),
        "seeds": len(res.seeds),
        "seed_ranges": len(res.seed_ranges),
        "final_intervals": len(res.final_intervals),
        "lowest_location_seeds": res.lowest_location_seeds,
        "lowest_location_ranges": res.lowest_location_ranges,
    }
    save_summary_json(summary, out_dir / "summary.json")
    print(json.dumps(summary))

if __name__ == "__main__":
    main()
