# common/viz.py
import os
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from rlc_trace_report.common.report import HEADERS, RATE_COLUMNS


def _ensure_dir(d):
    os.makedirs(d, exist_ok=True)
    return d


def plot_throughput_bars(joined, out_dir="outputs/figures", name="rlc_throughput.png"):
    """Grouped bars of the four average rates per IMSI; missing directions plot as 0."""
    _ensure_dir(out_dir)
    imsis = [str(i) for i in joined["imsi"]]
    x = np.arange(len(imsis))
    width = 0.2
    fig = plt.figure(figsize=(max(6, 1.2 * len(imsis) + 2), 4))
    ax = fig.add_subplot(111)
    for k, (col, label) in enumerate(zip(RATE_COLUMNS, HEADERS[1:])):
        vals = np.nan_to_num(joined[col].to_numpy(dtype=float), nan=0.0)
        ax.bar(x + (k - 1.5) * width, vals, width, label=label)
    ax.set_xticks(x)
    ax.set_xticklabels(imsis)
    ax.set_xlabel("IMSI")
    ax.set_ylabel("Throughput (B/s)")
    ax.set_title("Average RLC throughput per IMSI")
    ax.legend(fontsize="small")
    out = os.path.join(out_dir, name)
    fig.savefig(out, bbox_inches="tight")
    plt.close(fig)
    return out
