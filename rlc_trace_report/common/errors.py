# common/errors.py
"""
Failure kinds raised by the trace pipeline.

Everything derives from RlcTraceError so the CLI can report any of them in one
place; each also derives from the closest builtin so callers that only know
FileNotFoundError / ValueError still catch them.
"""
from typing import Optional


class RlcTraceError(Exception):
    """Base class for all trace pipeline failures."""


class TraceFileNotFound(RlcTraceError, FileNotFoundError):
    def __init__(self, path: str, reason: str = ""):
        self.path = str(path)
        self.reason = reason
        msg = f"Cannot open trace file: {self.path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)

    def __str__(self):
        return self.args[0]


class MalformedRecord(RlcTraceError, ValueError):
    def __init__(self, message: str, line: str = "", source: Optional[str] = None,
                 lineno: Optional[int] = None):
        self.line = line
        self.source = source
        self.lineno = lineno
        where = ""
        if source is not None:
            where = f"{source}:{lineno}: " if lineno is not None else f"{source}: "
        elif lineno is not None:
            where = f"line {lineno}: "
        super().__init__(f"{where}{message}")


class EmptyMeasurementWindow(RlcTraceError, ZeroDivisionError):
    def __init__(self, imsi: str, source: Optional[str] = None, n_samples: int = 0):
        self.imsi = imsi
        self.source = source
        self.n_samples = n_samples
        msg = f"IMSI {imsi!r} has a zero-length measurement window ({n_samples} samples)"
        if source:
            msg += f" in {source}"
        super().__init__(msg)


class ConfigError(RlcTraceError, ValueError):
    """Unreadable or invalid report configuration."""
