# common/config.py
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional
import yaml

from rlc_trace_report.common.errors import ConfigError

DL_RLC_TRACEFILE = "DlRlcStats.txt"
UL_RLC_TRACEFILE = "UlRlcStats.txt"


@dataclass(frozen=True)
class ReportConfig:
    dl_trace: str = DL_RLC_TRACEFILE
    ul_trace: str = UL_RLC_TRACEFILE
    output: Optional[str] = None       # None -> stdout
    csv: Optional[str] = None
    markdown: Optional[str] = None
    plot_dir: Optional[str] = None
    skip_empty: bool = False           # drop zero-window IMSIs instead of aborting
    log_level: Optional[str] = None

    def merged(self, overrides: Dict[str, Any]) -> "ReportConfig":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_report_config(path: str, base: ReportConfig = None) -> ReportConfig:
    base = base or ReportConfig()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return base
    # Accepts either {'report': {...}} or the mapping itself
    if isinstance(data, dict) and isinstance(data.get("report"), dict):
        data = data["report"]
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(ReportConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")
    if "skip_empty" in data and not isinstance(data["skip_empty"], bool):
        raise ConfigError(f"skip_empty must be true/false in {path}")
    return base.merged(data)
