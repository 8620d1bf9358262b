# common/metrics.py
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Sequence, Tuple
import logging
import pandas as pd

from rlc_trace_report.common.data import RawMeasurement, SubscriberTraceGroup
from rlc_trace_report.common.errors import EmptyMeasurementWindow

logger = logging.getLogger(__name__)

AGG_COLUMNS = ["imsi", "avg_rx_throughput", "avg_tx_throughput",
               "total_duration", "total_rx_bytes", "total_tx_bytes", "n_samples"]


@dataclass(frozen=True)
class AggregatedThroughput:
    imsi: str
    avg_rx_throughput: float   # B/s
    avg_tx_throughput: float   # B/s
    total_duration: float
    total_rx_bytes: int
    total_tx_bytes: int
    n_samples: int


def aggregate_subscriber(imsi: str, measurements: Sequence[RawMeasurement],
                         source: Optional[str] = None) -> AggregatedThroughput:
    total_time = 0.0
    total_rx = 0
    total_tx = 0
    for m in measurements:
        total_time += m.end - m.start
        total_rx += m.rx_bytes
        total_tx += m.tx_bytes
    if total_time == 0:
        raise EmptyMeasurementWindow(imsi, source=source, n_samples=len(measurements))
    return AggregatedThroughput(
        imsi=imsi,
        avg_rx_throughput=total_rx / total_time,
        avg_tx_throughput=total_tx / total_time,
        total_duration=total_time,
        total_rx_bytes=total_rx,
        total_tx_bytes=total_tx,
        n_samples=len(measurements),
    )


def aggregate_throughput(group: SubscriberTraceGroup, source: Optional[str] = None
                         ) -> Tuple[List[AggregatedThroughput], List[EmptyMeasurementWindow]]:
    """
    Per-IMSI averages for one direction.

    Subscribers whose window is empty are returned as failures next to the
    successful results; the caller decides whether that is fatal.
    """
    results = []
    failures = []
    for imsi, measurements in group.items():
        try:
            results.append(aggregate_subscriber(imsi, measurements, source=source))
        except EmptyMeasurementWindow as e:
            logger.debug(str(e))
            failures.append(e)
    return results, failures


def aggregates_to_frame(aggs: Sequence[AggregatedThroughput]) -> pd.DataFrame:
    df = pd.DataFrame([asdict(a) for a in aggs], columns=AGG_COLUMNS)
    df["imsi"] = df["imsi"].astype(str)
    return df


def totals_by_imsi(aggs: Sequence[AggregatedThroughput]) -> Dict[str, Dict[str, float]]:
    """Byte totals reconstructed from the averages (avg * duration)."""
    return {
        a.imsi: {"rx_bytes": a.avg_rx_throughput * a.total_duration,
                 "tx_bytes": a.avg_tx_throughput * a.total_duration}
        for a in aggs
    }
