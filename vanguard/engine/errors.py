"""Exceptions raised by the progression core.

Bad content and player choices never raise; these are reserved for invariant
violations the core itself would have caused.
"""
from __future__ import annotations


class ProgressionError(RuntimeError):
    """Base class for progression invariant violations."""


class RosterCapacityError(ProgressionError):
    """Raised when a roster would exceed its capacity or hold a duplicate."""


class SamplingError(ProgressionError):
    """Raised in strict mode when a weighted draw has no usable weight."""


class ContentError(ProgressionError):
    """Raised when required content (e.g. a starter weapon) is missing."""


__all__ = ["ProgressionError", "RosterCapacityError", "SamplingError", "ContentError"]
