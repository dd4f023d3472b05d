"""Upgrade definitions and the read-only catalog they are loaded into."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from vanguard.assets.loading import iter_content
from vanguard.combat.effects import EFFECT_KINDS, WeaponEffect
from vanguard.combat.weapons import WeaponKind
from vanguard.engine.logger import ChannelLogger


def _key(value: str) -> str:
    return str(value).replace("_", "").replace("-", "").lower()


class UpgradeCategory(Enum):
    PLAYER_MOVE_SPEED = "player_move_speed"
    PLAYER_MAX_HP = "player_max_hp"
    WEAPON_DAMAGE_GLOBAL = "weapon_damage_global"
    WEAPON_ATTACK_SPEED_GLOBAL = "weapon_attack_speed_global"
    NEW_WEAPON = "new_weapon"
    WEAPON_SPECIFIC = "weapon_specific"
    PASSIVE = "passive"

    @classmethod
    def parse(cls, value: str) -> "UpgradeCategory":
        for category in cls:
            if _key(category.value) == _key(value):
                return category
        raise ValueError(f"Unknown upgrade category '{value}'")


class PassiveEffect(Enum):
    LIFESTEAL = "lifesteal"
    MAGNET = "magnet"
    LUCKY_COIN = "lucky_coin"

    @classmethod
    def parse(cls, value: str) -> "PassiveEffect":
        for passive in cls:
            if _key(passive.value) == _key(value):
                return passive
        raise ValueError(f"Unknown passive '{value}'")


# Stack without limit and are never recorded as applied.
REPEATABLE_CATEGORIES = frozenset(
    {
        UpgradeCategory.PLAYER_MOVE_SPEED,
        UpgradeCategory.PLAYER_MAX_HP,
        UpgradeCategory.WEAPON_DAMAGE_GLOBAL,
        UpgradeCategory.WEAPON_ATTACK_SPEED_GLOBAL,
    }
)

RARITY_WEIGHTS = {"common": 100, "uncommon": 50, "rare": 25, "epic": 10}


@dataclass(frozen=True)
class UpgradeDefinition:
    """One possible level-up choice."""

    id: str
    category: UpgradeCategory
    magnitude: float = 0.0
    rarity_weight: int = 100
    prerequisite: Optional[str] = None
    weapon_id: Optional[str] = None
    weapon_kind: Optional[WeaponKind] = None
    weapon_effect: Optional[WeaponEffect] = None
    passive: Optional[PassiveEffect] = None
    name: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "UpgradeDefinition":
        category = UpgradeCategory.parse(data["category"])
        weight = data.get("rarityWeight", 100)
        if isinstance(weight, str):
            weight = RARITY_WEIGHTS[weight.lower()]
        weapon_kind = data.get("weaponKind")
        effect = data.get("effect")
        passive = data.get("passive")
        return cls(
            id=data["id"],
            category=category,
            magnitude=float(data.get("magnitude", 0.0)),
            rarity_weight=int(weight),
            prerequisite=data.get("prerequisite") or None,
            weapon_id=data.get("weaponId") or None,
            weapon_kind=WeaponKind.parse(weapon_kind) if weapon_kind else None,
            weapon_effect=WeaponEffect.parse(effect) if effect else None,
            passive=PassiveEffect.parse(passive) if passive else None,
            name=data.get("name", data["id"]),
            description=data.get("description", ""),
        )

    @property
    def is_repeatable(self) -> bool:
        return self.category in REPEATABLE_CATEGORIES

    def problems(self) -> List[str]:
        """Reasons this definition can't be used; empty when well formed."""

        issues: List[str] = []
        if not isinstance(self.id, str) or not self.id:
            issues.append("missing id")
        if not isinstance(self.category, UpgradeCategory):
            issues.append(f"bad category {self.category!r}")
            return issues
        if isinstance(self.rarity_weight, bool) or not isinstance(self.rarity_weight, int):
            issues.append(f"rarity weight {self.rarity_weight!r} is not an integer")
        elif self.rarity_weight <= 0:
            issues.append(f"rarity weight {self.rarity_weight} is not positive")
        if not isinstance(self.magnitude, (int, float)) or not math.isfinite(self.magnitude):
            issues.append(f"magnitude {self.magnitude!r} is not a finite number")
        if self.category is UpgradeCategory.NEW_WEAPON and (
            not isinstance(self.weapon_id, str) or not self.weapon_id
        ):
            issues.append("new weapon upgrade without weapon id")
        if self.category is UpgradeCategory.WEAPON_SPECIFIC:
            if not isinstance(self.weapon_kind, WeaponKind) or not isinstance(
                self.weapon_effect, WeaponEffect
            ):
                issues.append("weapon upgrade without weapon kind and effect")
            elif EFFECT_KINDS[self.weapon_effect] is not self.weapon_kind:
                issues.append(
                    f"effect {self.weapon_effect.value} does not apply to {self.weapon_kind.value}"
                )
        if self.category is UpgradeCategory.PASSIVE and not isinstance(self.passive, PassiveEffect):
            issues.append("passive upgrade without passive effect")
        return issues

    def is_well_formed(self) -> bool:
        return not self.problems()


def definition_problems(definition: object) -> List[str]:
    """Like :meth:`UpgradeDefinition.problems` but safe for any object."""

    if definition is None:
        return ["null definition"]
    if not isinstance(definition, UpgradeDefinition):
        return [f"not an upgrade definition ({type(definition).__name__})"]
    return definition.problems()


class UpgradeCatalog:
    """Ordered, read-only table of upgrade definitions.

    Ids are unique: a later definition with a known id replaces the earlier
    one in place. ``None`` placeholders are kept so callers see what content
    shipped; the validator filters them.
    """

    def __init__(
        self,
        definitions: Iterable[Optional[UpgradeDefinition]] = (),
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self._entries: List[Optional[UpgradeDefinition]] = []
        for definition in definitions:
            self._add(definition, logger)

    def load_directory(self, directory: Path, logger: Optional[ChannelLogger] = None) -> None:
        for path, entry in iter_content(directory, "upgrades", logger):
            try:
                definition = UpgradeDefinition.from_dict(entry)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                if logger:
                    logger.warning("Skipping malformed upgrade in %s: %s", path.name, exc)
                continue
            self._add(definition, logger)

    def _add(self, definition: Optional[UpgradeDefinition], logger: Optional[ChannelLogger]) -> None:
        upgrade_id = getattr(definition, "id", None)
        for index, existing in enumerate(self._entries):
            if upgrade_id is not None and getattr(existing, "id", None) == upgrade_id:
                if logger:
                    logger.warning("Upgrade '%s' redefined; keeping the later entry", upgrade_id)
                self._entries[index] = definition
                return
        self._entries.append(definition)

    def __iter__(self) -> Iterator[Optional[UpgradeDefinition]]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, upgrade_id: object) -> bool:
        return upgrade_id is not None and any(
            getattr(entry, "id", None) == upgrade_id for entry in self._entries
        )

    def get(self, upgrade_id: str) -> UpgradeDefinition:
        for entry in self._entries:
            if getattr(entry, "id", None) == upgrade_id:
                return entry
        raise KeyError(upgrade_id)


__all__ = [
    "UpgradeCategory",
    "PassiveEffect",
    "REPEATABLE_CATEGORIES",
    "RARITY_WEIGHTS",
    "UpgradeDefinition",
    "definition_problems",
    "UpgradeCatalog",
]
