"""Pixel Vanguard run progression: level-up offers, upgrades and weapons."""
from __future__ import annotations

__version__ = "0.3.0"

__all__ = ["__version__"]
