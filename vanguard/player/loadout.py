"""Character definitions and the baseline a run starts from."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from vanguard.assets.loading import iter_content
from vanguard.engine.logger import ChannelLogger
from vanguard.player.player import Player

# Per-level bonuses bought in the between-run shop.
VITALITY_HP_PER_LEVEL = 10.0
GREAVES_SPEED_PER_LEVEL = 0.05
MIGHT_DAMAGE_PER_LEVEL = 0.10
MAGNET_RANGE_PER_LEVEL = 0.10
BASE_MAGNET_RANGE = 3.0

SHOP_STATS = ("might", "vitality", "greaves", "magnet")


@dataclass(frozen=True)
class CharacterData:
    id: str
    name: str
    max_health: float
    move_speed: float
    base_damage_multiplier: float
    starter_weapon: str

    @classmethod
    def from_dict(cls, data: Dict) -> "CharacterData":
        max_health = float(data.get("maxHealth", 100.0))
        move_speed = float(data.get("moveSpeed", 5.0))
        if max_health <= 0.0 or move_speed <= 0.0:
            raise ValueError(f"Character '{data['id']}' needs positive health and speed")
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            max_health=max_health,
            move_speed=move_speed,
            base_damage_multiplier=float(data.get("baseDamageMultiplier", 1.0)),
            starter_weapon=data["starterWeapon"],
        )


class CharacterDatabase:
    def __init__(self) -> None:
        self.characters: Dict[str, CharacterData] = {}

    def load_directory(self, directory: Path, logger: Optional[ChannelLogger] = None) -> None:
        for path, entry in iter_content(directory, "characters", logger):
            try:
                character = CharacterData.from_dict(entry)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                if logger:
                    logger.warning("Skipping malformed character in %s: %s", path.name, exc)
                continue
            self.characters[character.id] = character

    def get(self, character_id: str) -> CharacterData:
        return self.characters[character_id]


class ShopLevels:
    """Read-only view of persisted shop upgrade levels.

    Only the stats in ``SHOP_STATS`` are kept; anything else in the save is
    ignored.
    """

    def __init__(
        self,
        levels: Optional[Mapping[str, int]] = None,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        known = {}
        for key, value in (levels or {}).items():
            if key not in SHOP_STATS:
                if logger:
                    logger.warning("Ignoring unknown shop stat %r", key)
                continue
            known[key] = max(0, int(value))
        self._levels = MappingProxyType(known)

    def level(self, stat: str) -> int:
        return self._levels.get(stat, 0)

    def __contains__(self, stat: object) -> bool:
        return stat in self._levels


@dataclass(frozen=True)
class StartingStats:
    max_hp: float
    move_speed: float
    damage_multiplier: float
    magnet_range: float


def starting_stats(character: CharacterData, shop: ShopLevels) -> StartingStats:
    return StartingStats(
        max_hp=character.max_health + shop.level("vitality") * VITALITY_HP_PER_LEVEL,
        move_speed=character.move_speed * (1.0 + shop.level("greaves") * GREAVES_SPEED_PER_LEVEL),
        damage_multiplier=character.base_damage_multiplier
        * (1.0 + shop.level("might") * MIGHT_DAMAGE_PER_LEVEL),
        magnet_range=BASE_MAGNET_RANGE * (1.0 + shop.level("magnet") * MAGNET_RANGE_PER_LEVEL),
    )


def build_player(stats: StartingStats) -> Player:
    return Player(
        max_hp=stats.max_hp,
        move_speed=stats.move_speed,
        damage_multiplier=stats.damage_multiplier,
    )


__all__ = [
    "CharacterData",
    "CharacterDatabase",
    "ShopLevels",
    "StartingStats",
    "starting_stats",
    "build_player",
    "SHOP_STATS",
]
