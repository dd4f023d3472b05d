"""Progression tuning read from settings.json."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_CONTENT_ROOT = Path(__file__).resolve().parents[1] / "assets"

SETTINGS_PATH = Path("settings.json")


def load_settings(settings_path: Optional[Path] = None) -> Dict[str, Any]:
    path = settings_path or SETTINGS_PATH
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


@dataclass(frozen=True)
class ProgressionSettings:
    """Limits and knobs shared by the selector, applicator and session."""

    offer_count: int = 3
    roster_capacity: int = 4
    passive_slot_cap: int = 3
    cooldown_floor: float = 0.5
    # Debug builds fail loudly on degenerate weights; release falls back to uniform.
    strict_sampling: bool = False
    content_root: Path = field(default=DEFAULT_CONTENT_ROOT)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProgressionSettings":
        content_root = data.get("contentRoot")
        return cls(
            offer_count=max(1, int(data.get("offerCount", 3))),
            roster_capacity=max(1, int(data.get("rosterCapacity", 4))),
            passive_slot_cap=max(0, int(data.get("passiveSlotCap", 3))),
            cooldown_floor=max(0.0, float(data.get("cooldownFloor", 0.5))),
            strict_sampling=bool(data.get("strictSampling", False)),
            content_root=Path(content_root) if content_root else DEFAULT_CONTENT_ROOT,
        )

    @classmethod
    def from_settings(cls, settings_path: Optional[Path] = None) -> "ProgressionSettings":
        data = load_settings(settings_path)
        progression = data.get("progression", {})
        if not isinstance(progression, dict):
            return cls()
        try:
            return cls.from_dict(progression)
        except (TypeError, ValueError):
            return cls()


__all__ = ["ProgressionSettings", "load_settings", "DEFAULT_CONTENT_ROOT"]
