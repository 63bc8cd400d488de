from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Optional

log = logging.getLogger(__name__)

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".switch_scan")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")


@dataclass
class ScanConfig:
    speed_ms: int = 1000          # group scan period; items scan at half of it
    layout: Optional[str] = None  # None = bundled layout
    switch_key: str = "space"     # Tk keysym that acts as the switch
    debounce_ms: int = 0
    speech: bool = True
    high_contrast: bool = False
    audio_switch: bool = False
    audio_device: Optional[str] = None

    def validate(self) -> "ScanConfig":
        if isinstance(self.speed_ms, bool) or not isinstance(self.speed_ms, int) or self.speed_ms <= 0:
            raise ValueError(f"speed_ms must be a positive integer (got {self.speed_ms!r})")
        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms must be >= 0 (got {self.debounce_ms!r})")
        return self


def load_config(path: str = CONFIG_FILE) -> ScanConfig:
    """Return saved settings, or defaults if there are none or they are unreadable."""
    if not os.path.exists(path):
        return ScanConfig()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        known = {f.name for f in fields(ScanConfig)}
        return ScanConfig(**{k: v for k, v in data.items() if k in known}).validate()
    except (OSError, ValueError, TypeError, AttributeError):
        log.warning("ignoring unreadable config %s", path, exc_info=True)
        return ScanConfig()


def save_config(config: ScanConfig, path: str = CONFIG_FILE) -> None:
    """Persist ``config`` to ``path`` in JSON format."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(config), f, indent=2)
