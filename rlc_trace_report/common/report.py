# common/report.py
import os, datetime
from typing import Any, Dict, List, Sequence, TextIO
from pathlib import Path
import pandas as pd

from rlc_trace_report.common.metrics import AggregatedThroughput, aggregates_to_frame

IMSI_WIDTH = 4
COL_WIDTH = 32
MISSING = "n/a"

RATE_COLUMNS = ["dl_rx_bps", "dl_tx_bps", "ul_rx_bps", "ul_tx_bps"]
HEADERS = [
    "IMSI",
    "Avg DL/Rx Throughput(B/s)",
    "Avg DL/Tx Throughput(B/s)",
    "Avg UL/Rx Throughput(B/s)",
    "Avg UL/Tx Throughput(B/s)",
]


def _fmt_rate(x) -> str:
    if x is None or pd.isna(x):
        return MISSING
    return format(float(x), "g")


def _direction_frame(aggs: Sequence[AggregatedThroughput], prefix: str) -> pd.DataFrame:
    df = aggregates_to_frame(aggs)[["imsi", "avg_rx_throughput", "avg_tx_throughput"]]
    df = df.rename(columns={"avg_rx_throughput": f"{prefix}_rx_bps",
                            "avg_tx_throughput": f"{prefix}_tx_bps"})
    return df.sort_values("imsi", kind="mergesort", ignore_index=True)


def join_directions(dl: Sequence[AggregatedThroughput], ul: Sequence[AggregatedThroughput]) -> pd.DataFrame:
    """
    Outer join of DL and UL aggregates on IMSI, sorted by IMSI string.
    A direction without the IMSI leaves NaN in its two columns.
    """
    joined = pd.merge(_direction_frame(dl, "dl"), _direction_frame(ul, "ul"),
                      on="imsi", how="outer", sort=False)
    joined = joined.sort_values("imsi", kind="mergesort", ignore_index=True)
    return joined[["imsi"] + RATE_COLUMNS]


def format_table(joined: pd.DataFrame) -> str:
    lines = [f"{HEADERS[0]:>{IMSI_WIDTH}}" + "".join(f"{h:>{COL_WIDTH}}" for h in HEADERS[1:])]
    for row in joined.itertuples(index=False):
        cells = [_fmt_rate(getattr(row, c)) for c in RATE_COLUMNS]
        lines.append(f"{row.imsi:>{IMSI_WIDTH}}" + "".join(f"{c:>{COL_WIDTH}}" for c in cells))
    return "\n".join(lines) + "\n"


def render_table(dl: Sequence[AggregatedThroughput], ul: Sequence[AggregatedThroughput],
                 out: TextIO) -> pd.DataFrame:
    joined = join_directions(dl, ul)
    out.write(format_table(joined))
    return joined


def write_csv(joined: pd.DataFrame, path: str) -> str:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    joined.to_csv(path, index=False, na_rep="")
    return path


def _markdown_table(joined: pd.DataFrame) -> List[str]:
    lines = ["| " + " | ".join(HEADERS) + " |",
             "|" + "|".join(["---"] + ["---:"] * len(RATE_COLUMNS)) + "|"]
    for row in joined.itertuples(index=False):
        cells = [str(row.imsi)] + [_fmt_rate(getattr(row, c)) for c in RATE_COLUMNS]
        lines.append("| " + " | ".join(cells) + " |")
    return lines


def render_markdown(report_path: str, sections: List[Dict[str, Any]]):
    lines = []
    lines.append("# RLC Throughput Report")
    lines.append("")
    lines.append(f"_Generated: {datetime.datetime.now(datetime.timezone.utc).isoformat()}_")
    lines.append("")

    for s in sections:
        lines.append(f"## {s.get('title','Untitled')}")
        if s.get("desc"):
            lines.append(s["desc"])
            lines.append("")
        if s.get("table") is not None:
            lines.extend(_markdown_table(s["table"]))
            lines.append("")
        if s.get("artifacts"):
            lines.append("### Artifacts")
            for art in s["artifacts"]:
                p = Path(art).as_posix()
                lines.append(f"- {p}")
            lines.append("")
        if s.get("notes"):
            lines.append("### Notes")
            for n in s["notes"]:
                lines.append(f"- {n}")
            lines.append("")
        lines.append("---")
        lines.append("")

    parent = os.path.dirname(report_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(report_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
    return report_path
