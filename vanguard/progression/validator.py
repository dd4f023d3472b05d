"""Eligibility rules deciding which upgrades may be offered."""
from __future__ import annotations

from typing import Callable, Optional

from vanguard.combat.roster import WeaponRoster
from vanguard.engine.logger import ChannelLogger
from vanguard.progression.catalog import UpgradeCategory, UpgradeDefinition, definition_problems
from vanguard.progression.state import PASSIVE_SLOT_CAP, ProgressionState

MALFORMED = "malformed"

WeaponLookup = Callable[[str], bool]


def ineligibility_reason(
    definition: Optional[UpgradeDefinition],
    state: ProgressionState,
    roster: WeaponRoster,
    *,
    passive_cap: int = PASSIVE_SLOT_CAP,
    weapon_known: Optional[WeaponLookup] = None,
) -> Optional[str]:
    """Return why ``definition`` can't be offered, or None if it can.

    ``weapon_known`` (usually ``WeaponFactory.knows``) lets the caller hide
    weapon unlocks that could never be equipped.
    """

    problems = definition_problems(definition)
    if problems:
        return f"{MALFORMED}: {'; '.join(problems)}"

    if definition.is_repeatable:
        return None

    if state.has_upgrade(definition.id):
        return "already applied"

    category = definition.category
    if category is UpgradeCategory.NEW_WEAPON:
        if state.has_weapon(definition.weapon_id) or roster.contains(definition.weapon_id):
            return f"{definition.weapon_id} already equipped"
        if len(roster) >= roster.capacity:
            return f"roster full ({len(roster)}/{roster.capacity})"
        if weapon_known is not None and not weapon_known(definition.weapon_id):
            return f"unknown weapon {definition.weapon_id}"

    if category is UpgradeCategory.WEAPON_SPECIFIC and not roster.has_kind(definition.weapon_kind):
        return f"no {definition.weapon_kind.value} equipped"

    if definition.prerequisite and not state.has_upgrade(definition.prerequisite):
        return f"requires {definition.prerequisite}"

    if category is UpgradeCategory.PASSIVE and state.passive_slot_count >= passive_cap:
        return f"passive slots full ({state.passive_slot_count}/{passive_cap})"

    return None


def is_eligible(
    definition: Optional[UpgradeDefinition],
    state: ProgressionState,
    roster: WeaponRoster,
    *,
    passive_cap: int = PASSIVE_SLOT_CAP,
    weapon_known: Optional[WeaponLookup] = None,
    logger: Optional[ChannelLogger] = None,
) -> bool:
    reason = ineligibility_reason(
        definition, state, roster, passive_cap=passive_cap, weapon_known=weapon_known
    )
    if reason is None:
        return True
    if logger:
        upgrade_id = getattr(definition, "id", None)
        if reason.startswith(MALFORMED):
            logger.warning("Rejected upgrade %r: %s", upgrade_id, reason)
        elif logger.enabled:
            logger.debug("Filtered upgrade %s: %s", upgrade_id, reason)
    return False


__all__ = ["is_eligible", "ineligibility_reason", "MALFORMED", "WeaponLookup"]
