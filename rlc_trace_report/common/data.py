# common/data.py
from dataclasses import dataclass
from typing import Dict, List, Optional
import logging
import math
import re
import pandas as pd
import numpy as np

from rlc_trace_report.common.errors import MalformedRecord, TraceFileNotFound

logger = logging.getLogger(__name__)

# Column layout of the simulator's RLC stats files
RLC_STATS_COLUMNS = [
    "start", "end", "CellId", "IMSI", "RNTI", "LCID", "nTxPDUs", "TxBytes",
    "nRxPDUs", "RxBytes", "delay", "stdDev", "min", "max",
    "PduSize", "stdDev", "min", "max",
]
RLC_STATS_HEADER = "% " + "\t".join(RLC_STATS_COLUMNS)
MIN_FIELDS = 10
MAX_U64 = 2 ** 64 - 1

_UINT = re.compile(r"[0-9]+", re.ASCII)


@dataclass(frozen=True)
class RawMeasurement:
    start: float
    end: float
    imsi: str
    tx_bytes: int
    rx_bytes: int

    @property
    def duration(self) -> float:
        return self.end - self.start


# imsi -> measurements in file order
SubscriberTraceGroup = Dict[str, List[RawMeasurement]]


def _to_float(token: str, name: str, line: str, source, lineno) -> float:
    try:
        value = float(token)
    except ValueError:
        raise MalformedRecord(f"{name} is not a number: {token!r}", line, source, lineno) from None
    if not math.isfinite(value):
        raise MalformedRecord(f"{name} is not finite: {token!r}", line, source, lineno)
    return value


def _to_u64(token: str, name: str, line: str, source, lineno) -> int:
    if not _UINT.fullmatch(token):
        raise MalformedRecord(f"{name} is not an unsigned integer: {token!r}", line, source, lineno)
    value = int(token)
    if value > MAX_U64:
        raise MalformedRecord(f"{name} does not fit in 64 bits: {token!r}", line, source, lineno)
    return value


def parse_record(line: str, source: Optional[str] = None, lineno: Optional[int] = None) -> RawMeasurement:
    """
    Decode one data line of an RLC stats file.

    Only columns 0, 1, 3, 7 and 9 (start, end, IMSI, TxBytes, RxBytes) are kept;
    anything after the tenth column is ignored. Raises MalformedRecord when the
    line is short or a numeric column does not convert.
    """
    tokens = line.split()
    if len(tokens) < MIN_FIELDS:
        raise MalformedRecord(
            f"expected at least {MIN_FIELDS} fields, got {len(tokens)}", line, source, lineno)
    return RawMeasurement(
        start=_to_float(tokens[0], "start", line, source, lineno),
        end=_to_float(tokens[1], "end", line, source, lineno),
        imsi=tokens[3],
        tx_bytes=_to_u64(tokens[7], "TxBytes", line, source, lineno),
        rx_bytes=_to_u64(tokens[9], "RxBytes", line, source, lineno),
    )


def read_trace_file(path: str) -> SubscriberTraceGroup:
    """Parse a whole trace file (header skipped) into measurements grouped by IMSI."""
    path = str(path)
    logger.debug(f"Loading RLC trace: {path}")
    try:
        f = open(path, "r", encoding="utf-8")
    except OSError as e:
        raise TraceFileNotFound(path, e.strerror or str(e)) from e

    group: SubscriberTraceGroup = {}
    n_records = 0
    with f:
        try:
            header = f.readline()
            if not header:
                logger.warning(f"Trace file {path} is empty")
                return group
            for lineno, line in enumerate(f, start=2):
                if not line.strip():
                    continue
                rec = parse_record(line, source=path, lineno=lineno)
                group.setdefault(rec.imsi, []).append(rec)
                n_records += 1
        except UnicodeDecodeError as e:
            raise MalformedRecord(f"not a text trace ({e.reason})", source=path) from e

    logger.info(f"Loaded {n_records} records for {len(group)} IMSIs from {path}")
    return group


def group_to_frame(group: SubscriberTraceGroup) -> pd.DataFrame:
    """Flatten a grouped trace into one row per measurement."""
    rows = [
        {"imsi": m.imsi, "start": m.start, "end": m.end,
         "tx_bytes": m.tx_bytes, "rx_bytes": m.rx_bytes}
        for measurements in group.values() for m in measurements
    ]
    return pd.DataFrame(rows, columns=["imsi", "start", "end", "tx_bytes", "rx_bytes"])


@dataclass
class SynthConfig:
    n_ue: int = 2
    duration_sec: float = 5.0
    epoch_sec: float = 0.25          # simulator's default RLC stats epoch
    cell_id: int = 1
    lcid: int = 3
    dl_rate_bps: float = 4000.0      # mean bytes per second per UE
    ul_rate_bps: float = 1500.0
    start_offset_sec: float = 0.0
    uplink_only_ue: bool = False     # extra IMSI present in the UL file only
    seed: int = 42


def _trace_rows(cfg: SynthConfig, rate_bps: float, imsis: List[str], rng) -> List[dict]:
    n_epochs = max(1, int(round(cfg.duration_sec / cfg.epoch_sec)))
    rows = []
    for k in range(n_epochs):
        start = cfg.start_offset_sec + k * cfg.epoch_sec
        end = start + cfg.epoch_sec
        for idx, imsi in enumerate(imsis):
            pdu_size = int(rng.integers(40, 400))
            tx_bytes = int(rng.poisson(rate_bps * cfg.epoch_sec))
            n_tx = max(1, tx_bytes // pdu_size) if tx_bytes else 0
            # receiver lags the sender by a few PDUs at most
            n_rx = max(0, n_tx - int(rng.integers(0, 2)))
            rx_bytes = min(tx_bytes, n_rx * pdu_size)
            delay = abs(rng.normal(0.002, 0.0005))
            rows.append({
                "start": start, "end": end, "CellId": cfg.cell_id,
                "IMSI": imsi, "RNTI": idx + 1, "LCID": cfg.lcid,
                "nTxPDUs": n_tx, "TxBytes": tx_bytes,
                "nRxPDUs": n_rx, "RxBytes": rx_bytes,
                "delay": delay, "delayStdDev": 0.0, "delayMin": delay, "delayMax": delay,
                "PduSize": pdu_size, "PduSizeStdDev": 0.0, "PduSizeMin": pdu_size, "PduSizeMax": pdu_size,
            })
    return rows


def generate_rlc_trace_synthetic(cfg: SynthConfig) -> Dict[str, pd.DataFrame]:
    """
    Deterministic synthetic DL/UL RLC stats for cfg.n_ue subscribers.
    Returns {"DL": frame, "UL": frame}, columns in file order.
    """
    rng = np.random.default_rng(cfg.seed)
    imsis = [str(i + 1) for i in range(cfg.n_ue)]
    ul_imsis = imsis + [str(cfg.n_ue + 1)] if cfg.uplink_only_ue else imsis
    return {
        "DL": pd.DataFrame(_trace_rows(cfg, cfg.dl_rate_bps, imsis, rng)),
        "UL": pd.DataFrame(_trace_rows(cfg, cfg.ul_rate_bps, ul_imsis, rng)),
    }


def write_trace_file(df: pd.DataFrame, path: str) -> str:
    """Write a frame in RLC stats text format: '%'-prefixed header, tab-separated rows."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(RLC_STATS_HEADER + "\n")
        for row in df.itertuples(index=False):
            f.write("\t".join(str(v) for v in row) + "\n")
    return str(path)
