"""RLC trace ingestion, per-IMSI throughput aggregation and report rendering."""

__version__ = "0.1.0"
