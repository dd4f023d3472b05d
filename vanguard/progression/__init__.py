"""Level-up progression: eligibility, offers and upgrade effects."""

from .applicator import EffectApplicator
from .catalog import PassiveEffect, UpgradeCatalog, UpgradeCategory, UpgradeDefinition
from .selector import CandidateSelector, select
from .session import RunSession, RunStats
from .state import ProgressionState
from .validator import ineligibility_reason, is_eligible

__all__ = [
    "CandidateSelector",
    "EffectApplicator",
    "PassiveEffect",
    "ProgressionState",
    "RunSession",
    "RunStats",
    "UpgradeCatalog",
    "UpgradeCategory",
    "UpgradeDefinition",
    "ineligibility_reason",
    "is_eligible",
    "select",
]
