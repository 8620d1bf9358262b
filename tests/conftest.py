# Auto-adjust import paths for tests
# Lets the unit tests import rlc_trace_report from a plain checkout without installing it.
import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep test log files out of the working tree
os.environ.setdefault("RLC_LOG_DIR", tempfile.mkdtemp(prefix="rlc_logs_"))

HEADER = "% start\tend\tCellId\tIMSI\tRNTI\tLCID\tnTxPDUs\tTxBytes\tnRxPDUs\tRxBytes\tdelay\tstdDev\tmin\tmax\tPduSize\tstdDev\tmin\tmax"


def rlc_line(start, end, imsi, tx, rx, extra=True):
    """One data line in the simulator's column order."""
    fields = [start, end, 1, imsi, 1, 3, 4, tx, 4, rx]
    if extra:
        fields += [0.002, 0.0, 0.002, 0.002, 100, 0.0, 100, 100]
    return "\t".join(str(f) for f in fields)


@pytest.fixture
def make_trace(tmp_path):
    def _make(name, lines, header=HEADER):
        p = tmp_path / name
        body = ([header] if header is not None else []) + list(lines)
        p.write_text("\n".join(body) + ("\n" if body else ""), encoding="utf-8")
        return str(p)
    return _make
