from __future__ import annotations
import logging, os, pathlib
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

ROOT = pathlib.Path(__file__).resolve().parent
DEFAULT_CFG_PATH = ROOT / "config.yaml"
DEFAULT_EXAMPLE_CFG_PATH = ROOT / "config.example.yaml"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

DEFAULTS: Dict[str, Any] = {
    "log_level": "INFO",
    "ladder": {"step": 1.5, "floor": 50.0, "rounds": 8},
    "fuzzy_match_cutoff": 60,
}

load_dotenv()

def _load_yaml(path: pathlib.Path) -> dict:
    if not path.exists():
        # fall back to example
        path = DEFAULT_EXAMPLE_CFG_PATH
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def load_config(cfg_path: Optional[str] = None) -> Dict[str, Any]:
    """Merge the YAML file over DEFAULTS. Env vars win for the log level."""
    path = pathlib.Path(cfg_path or os.getenv("MERITWISE_CONFIG") or DEFAULT_CFG_PATH)
    raw = _load_yaml(path)
    cfg = {**DEFAULTS, **raw}
    cfg["ladder"] = {**DEFAULTS["ladder"], **(raw.get("ladder") or {})}
    cfg["log_level"] = os.getenv("MERITWISE_LOG_LEVEL", cfg["log_level"])
    return cfg

def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
