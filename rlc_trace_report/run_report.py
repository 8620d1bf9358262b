# run_report.py
"""
Aggregate the DL and UL RLC trace files of a simulation run and print the
per-IMSI throughput table.
Usage:
  python -m rlc_trace_report.run_report [--dl DlRlcStats.txt] [--ul UlRlcStats.txt] [--config report.yaml]
"""

import argparse, io, logging, sys
from typing import List, Optional, TextIO, Tuple
from dotenv import load_dotenv

from rlc_trace_report.common.util import get_logger
from rlc_trace_report.common.config import ReportConfig, load_report_config
from rlc_trace_report.common.data import read_trace_file
from rlc_trace_report.common.metrics import AggregatedThroughput, aggregate_throughput
from rlc_trace_report.common.report import render_table, write_csv, render_markdown
from rlc_trace_report.common.errors import RlcTraceError


def process_trace(path: str, direction: str, skip_empty: bool = False
                  ) -> Tuple[List[AggregatedThroughput], List[str]]:
    """
    Read and aggregate one direction. Returns the aggregates and the IMSIs
    dropped for an empty window (only possible with skip_empty).
    """
    logger = get_logger()
    group = read_trace_file(path)
    aggs, failures = aggregate_throughput(group, source=path)
    logger.info(f"{direction}: aggregated {len(aggs)} IMSIs from {path}")
    if failures:
        for e in failures:
            logger.log(logging.WARNING if skip_empty else logging.ERROR, f"{direction}: {e}")
        if not skip_empty:
            raise failures[0]
    return aggs, [e.imsi for e in failures]


def run(config: ReportConfig, out: Optional[TextIO] = None):
    """Run the whole pipeline; the table goes to `out`, else config.output, else stdout."""
    logger = get_logger(level=config.log_level)

    dl_aggs, dl_skipped = process_trace(config.dl_trace, "DL", config.skip_empty)
    ul_aggs, ul_skipped = process_trace(config.ul_trace, "UL", config.skip_empty)

    # Render fully before touching the sink so a failure never leaves half a table
    buf = io.StringIO()
    joined = render_table(dl_aggs, ul_aggs, buf)
    text = buf.getvalue()

    if out is not None:
        out.write(text)
    elif config.output:
        with open(config.output, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info(f"Wrote report: {config.output}")
    else:
        sys.stdout.write(text)

    artifacts = []
    if config.csv:
        artifacts.append(write_csv(joined, config.csv))
        logger.info(f"Wrote CSV: {config.csv}")
    if config.plot_dir:
        from rlc_trace_report.common.viz import plot_throughput_bars
        artifacts.append(plot_throughput_bars(joined, out_dir=config.plot_dir))
        logger.info(f"Wrote plot: {artifacts[-1]}")
    if config.markdown:
        notes = [f"{d}: IMSI {imsi} dropped (zero-length measurement window)"
                 for d, skipped in (("DL", dl_skipped), ("UL", ul_skipped)) for imsi in skipped]
        render_markdown(config.markdown, [{
            "title": "Per-IMSI average RLC throughput",
            "desc": f"Downlink trace `{config.dl_trace}`, uplink trace `{config.ul_trace}`. "
                    "`n/a` marks an IMSI with no records in that direction.",
            "table": joined,
            "artifacts": artifacts,
            "notes": notes,
        }])
        logger.info(f"Wrote Markdown report: {config.markdown}")

    logger.info(f"Report covers {len(joined)} IMSIs")
    return joined


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Per-IMSI RLC throughput report")
    parser.add_argument("--config", help="YAML config file (keys of ReportConfig)")
    parser.add_argument("--dl", dest="dl_trace", help="Downlink RLC stats file (default DlRlcStats.txt)")
    parser.add_argument("--ul", dest="ul_trace", help="Uplink RLC stats file (default UlRlcStats.txt)")
    parser.add_argument("--output", "-o", help="Write the table here instead of stdout")
    parser.add_argument("--csv", help="Also export the joined table as CSV")
    parser.add_argument("--markdown", help="Also write a Markdown report")
    parser.add_argument("--plot-dir", help="Also save a throughput bar chart here")
    parser.add_argument("--skip-empty", action="store_true", default=None,
                        help="Drop IMSIs with a zero-length window instead of aborting")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return parser


def main(argv=None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if k != "config"}
    logger = get_logger(level=args.log_level)
    try:
        config = load_report_config(args.config) if args.config else ReportConfig()
        config = config.merged(overrides)
        run(config)
    except RlcTraceError as e:
        logger.error(f"Report aborted: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
