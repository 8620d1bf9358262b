# common/util.py
import os, logging, sys

_LOGGERS = {}

ROOT_LOGGER = "rlc_trace_report"


def get_logger(name: str = ROOT_LOGGER, logfile: str = None, level: str = None) -> logging.Logger:
    """
    Cached logger with a console handler (stderr, the report owns stdout)
    and a file handler under $RLC_LOG_DIR.
    """
    global _LOGGERS
    if name in _LOGGERS:
        logger = _LOGGERS[name]
        if level:
            logger.setLevel(_level_from_name(level))
        return logger

    logger = logging.getLogger(name)
    logger.setLevel(_level_from_name(level or os.getenv("LOG_LEVEL", "INFO")))
    logger.propagate = False

    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    # Console handler
    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # File handler
    log_dir = os.getenv("RLC_LOG_DIR", os.path.join("outputs", "logs"))
    ensure_dir(log_dir)
    logfile = logfile or os.path.join(log_dir, f"{name}.log")
    fh = logging.FileHandler(logfile, mode="a", encoding="utf-8")
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    _LOGGERS[name] = logger
    return logger


def _level_from_name(level: str) -> int:
    return getattr(logging, str(level).upper(), logging.INFO)


def ensure_dir(path: str):
    os.makedirs(path, exist_ok=True)
    return path
