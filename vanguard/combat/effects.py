"""Weapon-specific upgrade effects.

Every effect belongs to exactly one weapon kind and has exactly one handler.
The tables are checked when this module is imported so a new effect cannot
be declared without wiring it up.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Optional

from vanguard.combat.weapons import (
    CrossbowParams,
    GreatswordParams,
    HolyWaterParams,
    OrbitalsParams,
    PARAM_TYPES,
    WeaponCapability,
    WeaponHandle,
    WeaponKind,
)
from vanguard.engine.logger import ChannelLogger


class WeaponEffect(Enum):
    MIRROR_SLASH = "mirror_slash"
    DAMAGE_BOOST = "damage_boost"
    COOLDOWN_BOOST = "cooldown_boost"
    MULTI_SHOT = "multi_shot"
    PIERCE = "pierce"
    PUDDLE_RADIUS = "puddle_radius"
    HP_SCALING = "hp_scaling"
    PUDDLE_DURATION = "puddle_duration"
    ORBIT_RADIUS = "orbit_radius"
    OVERCHARGE = "overcharge"

    @classmethod
    def parse(cls, value: str) -> "WeaponEffect":
        key = str(value).replace("_", "").replace("-", "").lower()
        for effect in cls:
            if effect.value.replace("_", "") == key:
                return effect
        raise ValueError(f"Unknown weapon effect '{value}'")


EFFECT_KINDS: Dict[WeaponEffect, WeaponKind] = {
    WeaponEffect.MIRROR_SLASH: WeaponKind.GREATSWORD,
    WeaponEffect.DAMAGE_BOOST: WeaponKind.GREATSWORD,
    WeaponEffect.COOLDOWN_BOOST: WeaponKind.GREATSWORD,
    WeaponEffect.MULTI_SHOT: WeaponKind.CROSSBOW,
    WeaponEffect.PIERCE: WeaponKind.CROSSBOW,
    WeaponEffect.PUDDLE_RADIUS: WeaponKind.HOLY_WATER,
    WeaponEffect.HP_SCALING: WeaponKind.HOLY_WATER,
    WeaponEffect.PUDDLE_DURATION: WeaponKind.HOLY_WATER,
    WeaponEffect.ORBIT_RADIUS: WeaponKind.MAGIC_ORBITALS,
    WeaponEffect.OVERCHARGE: WeaponKind.MAGIC_ORBITALS,
}

EffectHandler = Callable[[WeaponCapability, float, float], None]


def _mirror_slash(cap: WeaponCapability, magnitude: float, floor: float) -> None:
    params: GreatswordParams = cap.params
    params.swing_count = max(params.swing_count, int(magnitude) or 2)


def _damage_boost(cap: WeaponCapability, magnitude: float, floor: float) -> None:
    cap.scale_damage(magnitude)


def _cooldown_boost(cap: WeaponCapability, magnitude: float, floor: float) -> None:
    cap.scale_cooldown(magnitude, floor)


def _multi_shot(cap: WeaponCapability, magnitude: float, floor: float) -> None:
    # Tiered: the shot count is raised to the tier's count, never lowered.
    params: CrossbowParams = cap.params
    params.projectile_count = max(params.projectile_count, int(magnitude))


def _pierce(cap: WeaponCapability, magnitude: float, floor: float) -> None:
    params: CrossbowParams = cap.params
    params.pierce_count += max(1, int(magnitude))


def _puddle_radius(cap: WeaponCapability, magnitude: float, floor: float) -> None:
    params: HolyWaterParams = cap.params
    params.puddle_radius *= magnitude


def _hp_scaling(cap: WeaponCapability, magnitude: float, floor: float) -> None:
    params: HolyWaterParams = cap.params
    params.hp_scaling = magnitude


def _puddle_duration(cap: WeaponCapability, magnitude: float, floor: float) -> None:
    params: HolyWaterParams = cap.params
    params.puddle_duration *= magnitude


def _orbit_radius(cap: WeaponCapability, magnitude: float, floor: float) -> None:
    params: OrbitalsParams = cap.params
    params.orbit_radius *= magnitude


def _overcharge(cap: WeaponCapability, magnitude: float, floor: float) -> None:
    cap.scale_damage(magnitude)


EFFECT_HANDLERS: Dict[WeaponEffect, EffectHandler] = {
    WeaponEffect.MIRROR_SLASH: _mirror_slash,
    WeaponEffect.DAMAGE_BOOST: _damage_boost,
    WeaponEffect.COOLDOWN_BOOST: _cooldown_boost,
    WeaponEffect.MULTI_SHOT: _multi_shot,
    WeaponEffect.PIERCE: _pierce,
    WeaponEffect.PUDDLE_RADIUS: _puddle_radius,
    WeaponEffect.HP_SCALING: _hp_scaling,
    WeaponEffect.PUDDLE_DURATION: _puddle_duration,
    WeaponEffect.ORBIT_RADIUS: _orbit_radius,
    WeaponEffect.OVERCHARGE: _overcharge,
}


def _check_tables() -> None:
    missing_kind = [effect.name for effect in WeaponEffect if effect not in EFFECT_KINDS]
    missing_handler = [effect.name for effect in WeaponEffect if effect not in EFFECT_HANDLERS]
    if missing_kind or missing_handler:
        raise RuntimeError(
            f"Weapon effects not wired: kinds={missing_kind} handlers={missing_handler}"
        )
    unknown_kinds = [kind.name for kind in WeaponKind if kind not in PARAM_TYPES]
    if unknown_kinds:
        raise RuntimeError(f"Weapon kinds without parameters: {unknown_kinds}")


_check_tables()


def effect_kind(effect: WeaponEffect) -> WeaponKind:
    return EFFECT_KINDS[effect]


def apply_weapon_effect(
    handle: WeaponHandle,
    effect: WeaponEffect,
    magnitude: float,
    cooldown_floor: float,
    logger: Optional[ChannelLogger] = None,
) -> bool:
    """Apply ``effect`` to ``handle``; returns False if the kinds don't match."""

    if EFFECT_KINDS[effect] is not handle.kind:
        return False
    EFFECT_HANDLERS[effect](handle.capability, magnitude, cooldown_floor)
    if logger and logger.enabled:
        logger.info(
            "%s: %s x%.2f -> dmg=%.2f cd=%.2fs %s",
            handle.name,
            effect.value,
            magnitude,
            handle.capability.damage,
            handle.capability.cooldown,
            handle.capability.params,
        )
    return True


__all__ = [
    "WeaponEffect",
    "EFFECT_KINDS",
    "EFFECT_HANDLERS",
    "effect_kind",
    "apply_weapon_effect",
]
