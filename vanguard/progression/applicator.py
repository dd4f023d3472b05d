"""Applies a chosen upgrade to the player, the weapons and the run state."""
from __future__ import annotations

from typing import Callable, Dict, Optional

from vanguard.combat.effects import apply_weapon_effect
from vanguard.combat.roster import WeaponRoster
from vanguard.combat.weapons import WeaponFactory
from vanguard.engine.errors import ProgressionError
from vanguard.engine.logger import ChannelLogger
from vanguard.engine.settings import ProgressionSettings
from vanguard.progression.catalog import (
    PassiveEffect,
    UpgradeCategory,
    UpgradeDefinition,
    definition_problems,
)
from vanguard.progression.state import ProgressionState
from vanguard.world.pickups import PickupField


class EffectApplicator:
    """The only writer of :class:`ProgressionState` and roster weapons.

    ``player`` may be any object exposing ``get_move_speed``,
    ``set_move_speed`` and ``increase_max_hp``.
    """

    def __init__(
        self,
        factory: WeaponFactory,
        pickups: Optional[PickupField] = None,
        settings: Optional[ProgressionSettings] = None,
        logger: Optional[ChannelLogger] = None,
        weapons_logger: Optional[ChannelLogger] = None,
    ) -> None:
        self.factory = factory
        self.pickups = pickups
        self.settings = settings or ProgressionSettings()
        self.logger = logger
        self.weapons_logger = weapons_logger
        self._handlers: Dict[UpgradeCategory, Callable] = {
            UpgradeCategory.PLAYER_MOVE_SPEED: self._apply_move_speed,
            UpgradeCategory.PLAYER_MAX_HP: self._apply_max_hp,
            UpgradeCategory.WEAPON_DAMAGE_GLOBAL: self._apply_global_damage,
            UpgradeCategory.WEAPON_ATTACK_SPEED_GLOBAL: self._apply_global_cooldown,
            UpgradeCategory.NEW_WEAPON: self._apply_new_weapon,
            UpgradeCategory.WEAPON_SPECIFIC: self._apply_weapon_specific,
            UpgradeCategory.PASSIVE: self._apply_passive,
        }

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    def apply(
        self,
        definition: Optional[UpgradeDefinition],
        state: ProgressionState,
        roster: WeaponRoster,
        player,
    ) -> bool:
        """Apply one definition. Returns False when it was a no-op."""

        problems = definition_problems(definition)
        if problems:
            self._warn(
                "Refusing malformed upgrade %r: %s", getattr(definition, "id", None), "; ".join(problems)
            )
            return False

        applied = self._handlers[definition.category](definition, state, roster, player)
        if applied and not definition.is_repeatable:
            state.track_upgrade(definition.id)
        self._check_invariants(state, roster)
        if self.logger and self.logger.enabled:
            self.logger.info(
                "Applied %s (%s): %s",
                definition.id,
                definition.category.value,
                state.describe(self.settings.passive_slot_cap),
            )
        return applied

    def equip(self, weapon_id: str, state: ProgressionState, roster: WeaponRoster) -> bool:
        """Equip a weapon outside of a level-up (the run's starter weapon)."""

        if roster.contains(weapon_id) or state.has_weapon(weapon_id):
            self._warn("Weapon %s already equipped; ignoring", weapon_id)
            return False
        if roster.is_full:
            self._warn("Roster full (%d/%d); cannot equip %s", len(roster), roster.capacity, weapon_id)
            return False
        try:
            handle = self.factory.create(weapon_id)
        except KeyError:
            self._warn("Unknown weapon id %s", weapon_id)
            return False
        roster.add(handle)
        state.track_weapon(weapon_id)
        if self.weapons_logger and self.weapons_logger.enabled:
            self.weapons_logger.info(
                "Equipped %s (%s) slot %d/%d", handle.name, handle.kind.value, len(roster), roster.capacity
            )
        return True

    # ------------------------------------------------------------------
    # Player stats
    # ------------------------------------------------------------------
    def _apply_move_speed(self, definition, state, roster, player) -> bool:
        current = player.get_move_speed()
        player.set_move_speed(current * (1.0 + definition.magnitude / 100.0))
        if self.logger and self.logger.enabled:
            self.logger.info("Speed: %.2f -> %.2f", current, player.get_move_speed())
        return True

    def _apply_max_hp(self, definition, state, roster, player) -> bool:
        player.increase_max_hp(definition.magnitude)
        return True

    # ------------------------------------------------------------------
    # Weapons
    # ------------------------------------------------------------------
    def _apply_global_damage(self, definition, state, roster, player) -> bool:
        multiplier = 1.0 + definition.magnitude / 100.0
        for handle in roster:
            handle.capability.scale_damage(multiplier)
        return True

    def _apply_global_cooldown(self, definition, state, roster, player) -> bool:
        multiplier = 1.0 - definition.magnitude / 100.0
        floor = self.settings.cooldown_floor
        for handle in roster:
            before = handle.capability.cooldown
            after = handle.capability.scale_cooldown(multiplier, floor)
            if self.weapons_logger and self.weapons_logger.enabled:
                self.weapons_logger.debug("%s cooldown %.2fs -> %.2fs", handle.name, before, after)
        return True

    def _apply_new_weapon(self, definition, state, roster, player) -> bool:
        return self.equip(definition.weapon_id, state, roster)

    def _apply_weapon_specific(self, definition, state, roster, player) -> bool:
        matched = 0
        for handle in roster.of_kind(definition.weapon_kind):
            if apply_weapon_effect(
                handle,
                definition.weapon_effect,
                definition.magnitude,
                self.settings.cooldown_floor,
                self.weapons_logger,
            ):
                matched += 1
        if not matched and self.logger and self.logger.enabled:
            self.logger.debug("No %s equipped for %s", definition.weapon_kind.value, definition.id)
        return True

    # ------------------------------------------------------------------
    # Passives
    # ------------------------------------------------------------------
    def _apply_passive(self, definition, state, roster, player) -> bool:
        cap = self.settings.passive_slot_cap
        if state.passive_slot_count >= cap:
            self._warn("Passive slots full (%d/%d); ignoring %s", state.passive_slot_count, cap, definition.id)
            return False
        passive = definition.passive
        if passive is PassiveEffect.LIFESTEAL:
            state.add_lifesteal(definition.magnitude)
        elif passive is PassiveEffect.LUCKY_COIN:
            state.add_gold_bonus(definition.magnitude)
        elif passive is PassiveEffect.MAGNET:
            if self.pickups is not None:
                self.pickups.broadcast_magnet(definition.magnitude)
        state.passive_slot_count += 1
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _check_invariants(self, state: ProgressionState, roster: WeaponRoster) -> None:
        if len(roster) > roster.capacity:
            raise ProgressionError(f"Roster holds {len(roster)} weapons (capacity {roster.capacity})")
        if not 0 <= state.passive_slot_count <= self.settings.passive_slot_cap:
            raise ProgressionError(
                f"Passive slot count {state.passive_slot_count} outside 0..{self.settings.passive_slot_cap}"
            )

    def _warn(self, msg: str, *args) -> None:
        if self.logger:
            self.logger.warning(msg, *args)


__all__ = ["EffectApplicator"]
