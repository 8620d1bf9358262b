#!/usr/bin/env python3
"""
Report rendering: key-based DL/UL join, IMSI ordering and fixed-width layout.
"""

import io
import math

from rlc_trace_report.common.data import RawMeasurement
from rlc_trace_report.common.metrics import aggregate_subscriber
from rlc_trace_report.common.report import (
    HEADERS, MISSING, format_table, join_directions, render_table, write_csv, render_markdown,
)

HEADER_LINE = f"{'IMSI':>4}" + "".join(f"{h:>32}" for h in HEADERS[1:])


def agg(imsi, tx, rx, duration=1.0):
    return aggregate_subscriber(imsi, [RawMeasurement(0.0, duration, imsi, tx, rx)])


def test_header_row():
    out = io.StringIO()
    render_table([], [], out)
    assert out.getvalue() == HEADER_LINE + "\n"
    assert HEADER_LINE.startswith("IMSI" + " " * 7 + "Avg DL/Rx Throughput(B/s)")


def test_row_layout():
    out = io.StringIO()
    render_table([agg("1", 1000, 2000)], [agg("1", 300, 250, duration=2.0)], out)
    lines = out.getvalue().splitlines()
    assert lines[1] == f"{'1':>4}{'2000':>32}{'1000':>32}{'125':>32}{'150':>32}"


def test_numbers_use_six_significant_digits():
    out = io.StringIO()
    render_table([agg("1", 1234567, 1, duration=3.0)], [agg("1", 1, 1)], out)
    row = out.getvalue().splitlines()[1]
    assert "411522" in row
    out = io.StringIO()
    render_table([agg("1", 123456789, 0)], [], out)
    assert "1.23457e+08" in out.getvalue()


def test_uplink_only_imsi_gets_sentinel_in_dl_columns():
    joined = join_directions([agg("1", 10, 20)], [agg("1", 1, 2), agg("2", 3, 4)])
    assert joined["imsi"].tolist() == ["1", "2"]
    row2 = joined.iloc[1]
    assert math.isnan(row2["dl_rx_bps"]) and math.isnan(row2["dl_tx_bps"])
    assert row2["ul_rx_bps"] == 4.0 and row2["ul_tx_bps"] == 3.0

    text = format_table(joined).splitlines()
    assert text[2] == f"{'2':>4}{MISSING:>32}{MISSING:>32}{'4':>32}{'3':>32}"


def test_row_count_is_union_not_positional():
    dl = [agg("1", 1, 1), agg("3", 1, 1), agg("4", 1, 1)]
    ul = [agg("2", 1, 1), agg("3", 1, 1)]
    joined = join_directions(dl, ul)
    assert joined["imsi"].tolist() == ["1", "2", "3", "4"]
    assert len(format_table(joined).splitlines()) == 1 + 4


def test_sort_is_lexicographic():
    joined = join_directions([agg("9", 1, 1), agg("10", 1, 1), agg("2", 1, 1)], [])
    assert joined["imsi"].tolist() == ["10", "2", "9"]


def test_input_order_does_not_matter():
    a = [agg("3", 5, 6), agg("1", 7, 8)]
    b = [agg("2", 1, 2)]
    assert format_table(join_directions(a, b)) == format_table(join_directions(a[::-1], b))


def test_csv_export(tmp_path):
    joined = join_directions([agg("1", 10, 20)], [agg("2", 3, 4)])
    path = write_csv(joined, str(tmp_path / "out" / "rlc.csv"))
    lines = open(path, encoding="utf-8").read().splitlines()
    assert lines[0] == "imsi,dl_rx_bps,dl_tx_bps,ul_rx_bps,ul_tx_bps"
    assert lines[1] == "1,20.0,10.0,,"
    assert lines[2] == "2,,,4.0,3.0"


def test_markdown_report(tmp_path):
    joined = join_directions([agg("1", 10, 20)], [])
    path = render_markdown(str(tmp_path / "r.md"), [{
        "title": "Per-IMSI", "table": joined, "notes": ["UL: IMSI 5 dropped"],
    }])
    md = open(path, encoding="utf-8").read()
    assert "## Per-IMSI" in md
    assert "| 1 | 20 | 10 | n/a | n/a |" in md
    assert "- UL: IMSI 5 dropped" in md
