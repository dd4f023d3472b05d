"""Run-scoped progression bookkeeping."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Set

PASSIVE_SLOT_CAP = 3


@dataclass
class ProgressionState:
    """What this run has picked so far.

    Written only by :class:`vanguard.progression.applicator.EffectApplicator`.
    """

    applied_non_repeatable: Set[str] = field(default_factory=set)
    equipped_weapon_ids: Set[str] = field(default_factory=set)
    passive_slot_count: int = 0
    lifesteal_percent: float = 0.0
    gold_bonus_percent: float = 0.0

    def has_upgrade(self, upgrade_id: str) -> bool:
        return upgrade_id in self.applied_non_repeatable

    def has_weapon(self, weapon_id: str) -> bool:
        return weapon_id in self.equipped_weapon_ids

    def track_upgrade(self, upgrade_id: str) -> None:
        self.applied_non_repeatable.add(upgrade_id)

    def track_weapon(self, weapon_id: str) -> None:
        self.equipped_weapon_ids.add(weapon_id)

    def add_lifesteal(self, percent: float) -> None:
        self.lifesteal_percent += max(0.0, percent)

    def add_gold_bonus(self, percent: float) -> None:
        self.gold_bonus_percent += max(0.0, percent)

    def describe(self, passive_cap: int = PASSIVE_SLOT_CAP) -> str:
        return (
            f"Upgrades: {len(self.applied_non_repeatable)}, "
            f"Weapons: {len(self.equipped_weapon_ids)}, "
            f"Passives: {self.passive_slot_count}/{passive_cap}, "
            f"Lifesteal: {self.lifesteal_percent:.1f}%, "
            f"Gold Bonus: {self.gold_bonus_percent:.1f}%"
        )


__all__ = ["ProgressionState", "PASSIVE_SLOT_CAP"]
