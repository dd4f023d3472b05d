"""Weapon kinds, capability state, and weapon content loading."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from vanguard.assets.loading import iter_content
from vanguard.engine.logger import ChannelLogger


class WeaponKind(Enum):
    GREATSWORD = "greatsword"
    MAGIC_ORBITALS = "magic_orbitals"
    CROSSBOW = "crossbow"
    HOLY_WATER = "holy_water"

    @classmethod
    def parse(cls, value: str) -> "WeaponKind":
        """Accept ``holy_water``, ``holyWater`` or ``HOLY_WATER``."""

        key = str(value).replace("_", "").replace("-", "").lower()
        for kind in cls:
            if kind.value.replace("_", "") == key:
                return kind
        raise ValueError(f"Unknown weapon kind '{value}'")


@dataclass
class GreatswordParams:
    swing_radius: float = 2.0
    swing_count: int = 1

    @classmethod
    def from_dict(cls, data: Dict) -> "GreatswordParams":
        return cls(
            swing_radius=float(data.get("swingRadius", 2.0)),
            swing_count=int(data.get("swingCount", 1)),
        )


@dataclass
class OrbitalsParams:
    orbit_radius: float = 2.5
    orb_count: int = 3

    @classmethod
    def from_dict(cls, data: Dict) -> "OrbitalsParams":
        return cls(
            orbit_radius=float(data.get("orbitRadius", 2.5)),
            orb_count=int(data.get("orbCount", 3)),
        )


@dataclass
class CrossbowParams:
    projectile_count: int = 1
    pierce_count: int = 0
    projectile_speed: float = 10.0
    max_range: float = 15.0

    @classmethod
    def from_dict(cls, data: Dict) -> "CrossbowParams":
        return cls(
            projectile_count=int(data.get("projectileCount", 1)),
            pierce_count=int(data.get("pierceCount", 0)),
            projectile_speed=float(data.get("projectileSpeed", 10.0)),
            max_range=float(data.get("maxRange", 15.0)),
        )


@dataclass
class HolyWaterParams:
    puddle_radius: float = 1.5
    puddle_duration: float = 3.0
    tick_rate: float = 0.5
    # Fraction of an enemy's max HP added to each puddle tick.
    hp_scaling: float = 0.0
    zone_count: int = 1

    @classmethod
    def from_dict(cls, data: Dict) -> "HolyWaterParams":
        return cls(
            puddle_radius=float(data.get("puddleRadius", 1.5)),
            puddle_duration=float(data.get("puddleDuration", 3.0)),
            tick_rate=float(data.get("tickRate", 0.5)),
            hp_scaling=float(data.get("hpScaling", 0.0)),
            zone_count=int(data.get("zoneCount", 1)),
        )


KindParams = Union[GreatswordParams, OrbitalsParams, CrossbowParams, HolyWaterParams]

PARAM_TYPES = {
    WeaponKind.GREATSWORD: GreatswordParams,
    WeaponKind.MAGIC_ORBITALS: OrbitalsParams,
    WeaponKind.CROSSBOW: CrossbowParams,
    WeaponKind.HOLY_WATER: HolyWaterParams,
}


@dataclass
class WeaponCapability:
    """Mutable combat numbers for one equipped weapon."""

    damage: float
    cooldown: float
    knockback: float
    params: KindParams

    def scale_damage(self, multiplier: float) -> float:
        self.damage *= multiplier
        return self.damage

    def scale_cooldown(self, multiplier: float, floor: float) -> float:
        # Already at (or below) the floor: the upgrade is absorbed.
        if self.cooldown <= floor:
            return self.cooldown
        self.cooldown = max(self.cooldown * multiplier, floor)
        return self.cooldown

    def scale_knockback(self, multiplier: float) -> float:
        self.knockback *= multiplier
        return self.knockback

    def effective_damage(self, base_multiplier: float = 1.0) -> float:
        """Damage as dealt, including the character/shop multiplier."""

        return self.damage * base_multiplier


@dataclass
class WeaponData:
    id: str
    name: str
    kind: WeaponKind
    base_damage: float
    cooldown: float
    knockback: float
    params: KindParams

    @classmethod
    def from_dict(cls, data: Dict) -> "WeaponData":
        kind = WeaponKind.parse(data["kind"])
        raw_params = data.get("params", {})
        if not isinstance(raw_params, dict):
            raise ValueError(f"Weapon '{data['id']}' params must be an object")
        params = PARAM_TYPES[kind].from_dict(raw_params)
        base_damage = float(data.get("baseDamage", 10.0))
        cooldown = float(data.get("cooldown", 1.0))
        if base_damage <= 0.0 or cooldown <= 0.0:
            raise ValueError(f"Weapon '{data['id']}' needs positive damage and cooldown")
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            kind=kind,
            base_damage=base_damage,
            cooldown=cooldown,
            knockback=float(data.get("knockback", 3.0)),
            params=params,
        )


class WeaponDatabase:
    def __init__(self) -> None:
        self.weapons: Dict[str, WeaponData] = {}

    def load_directory(self, directory: Path, logger: Optional[ChannelLogger] = None) -> None:
        for path, entry in iter_content(directory, "weapons", logger):
            try:
                weapon = WeaponData.from_dict(entry)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                if logger:
                    logger.warning("Skipping malformed weapon in %s: %s", path.name, exc)
                continue
            self.weapons[weapon.id] = weapon

    def add(self, weapon: WeaponData) -> None:
        self.weapons[weapon.id] = weapon

    def get(self, weapon_id: str) -> WeaponData:
        return self.weapons[weapon_id]

    def __contains__(self, weapon_id: object) -> bool:
        return weapon_id in self.weapons


@dataclass
class WeaponHandle:
    """A live weapon in the roster."""

    id: str
    name: str
    kind: WeaponKind
    capability: WeaponCapability = field(repr=False)


class WeaponFactory:
    """Instantiates weapon handles from content and hands them to the world."""

    def __init__(
        self,
        database: WeaponDatabase,
        on_spawn: Optional[Callable[[WeaponHandle], None]] = None,
    ) -> None:
        self._database = database
        self._on_spawn = on_spawn

    def knows(self, weapon_id: str) -> bool:
        return weapon_id in self._database

    def create(self, weapon_id: str) -> WeaponHandle:
        data = self._database.get(weapon_id)
        capability = WeaponCapability(
            damage=data.base_damage,
            cooldown=data.cooldown,
            knockback=data.knockback,
            params=replace(data.params),
        )
        handle = WeaponHandle(data.id, data.name, data.kind, capability)
        if self._on_spawn is not None:
            self._on_spawn(handle)
        return handle


__all__ = [
    "WeaponKind",
    "GreatswordParams",
    "OrbitalsParams",
    "CrossbowParams",
    "HolyWaterParams",
    "PARAM_TYPES",
    "WeaponCapability",
    "WeaponData",
    "WeaponDatabase",
    "WeaponHandle",
    "WeaponFactory",
]
