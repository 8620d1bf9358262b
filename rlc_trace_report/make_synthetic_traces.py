# make_synthetic_traces.py
"""
Write a deterministic pair of DL/UL RLC stats files, the same shape the
simulator produces, for demos and offline checks of the report.
Usage:
  python -m rlc_trace_report.make_synthetic_traces [--out-dir outputs/traces] [--n-ue 2] [--seed 42]
"""
import argparse, json, os

from rlc_trace_report.common.util import get_logger, ensure_dir
from rlc_trace_report.common.config import DL_RLC_TRACEFILE, UL_RLC_TRACEFILE
from rlc_trace_report.common.data import SynthConfig, generate_rlc_trace_synthetic, write_trace_file


def run(out_dir="outputs/traces", cfg: SynthConfig = None):
    logger = get_logger()
    cfg = cfg or SynthConfig()
    ensure_dir(out_dir)
    frames = generate_rlc_trace_synthetic(cfg)
    paths = {
        "DL": write_trace_file(frames["DL"], os.path.join(out_dir, DL_RLC_TRACEFILE)),
        "UL": write_trace_file(frames["UL"], os.path.join(out_dir, UL_RLC_TRACEFILE)),
    }
    for direction, path in paths.items():
        logger.info(f"Wrote {len(frames[direction])} {direction} records to {path}")
    return paths


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate synthetic RLC stats traces")
    parser.add_argument("--out-dir", default="outputs/traces")
    parser.add_argument("--n-ue", type=int, default=2)
    parser.add_argument("--duration", type=float, default=5.0, help="Simulated seconds")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--uplink-only-ue", action="store_true",
                        help="Add one IMSI that only shows up in the UL trace")
    args = parser.parse_args(argv)
    cfg = SynthConfig(n_ue=args.n_ue, duration_sec=args.duration, seed=args.seed,
                      uplink_only_ue=args.uplink_only_ue)
    print(json.dumps(run(args.out_dir, cfg), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
