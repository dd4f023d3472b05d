"""XP gems and gold coins that drift toward the player once in magnet range."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, TYPE_CHECKING

from pygame.math import Vector2

from vanguard.engine.logger import ChannelLogger

if TYPE_CHECKING:
    from vanguard.player.player import Player
    from vanguard.progression.state import ProgressionState

COLLECT_RADIUS = 0.5
XP_PULL_SPEED = 10.0
GOLD_PULL_SPEED = 8.0


class PickupKind(Enum):
    XP = "xp"
    GOLD = "gold"


@dataclass
class Pickup:
    kind: PickupKind
    value: int
    position: Vector2
    magnet_range: float
    attracted: bool = False

    @property
    def pull_speed(self) -> float:
        return XP_PULL_SPEED if self.kind is PickupKind.XP else GOLD_PULL_SPEED


@dataclass
class PickupHaul:
    """What a single update collected."""

    xp: int = 0
    gold: int = 0
    collected: int = 0


@dataclass
class PickupField:
    """Live pickups in the arena."""

    base_magnet_range: float = 3.0
    collect_radius: float = COLLECT_RADIUS
    logger: Optional[ChannelLogger] = None
    _pickups: List[Pickup] = field(default_factory=list)

    def spawn(self, kind: PickupKind, value: int, position: Vector2) -> Pickup:
        pickup = Pickup(kind, int(value), Vector2(position), self.base_magnet_range)
        self._pickups.append(pickup)
        return pickup

    def live(self) -> List[Pickup]:
        return list(self._pickups)

    def __len__(self) -> int:
        return len(self._pickups)

    def broadcast_magnet(self, multiplier: float) -> int:
        """Scale the magnet range of pickups alive right now.

        Pickups spawned later keep ``base_magnet_range``.
        """

        for pickup in self._pickups:
            pickup.magnet_range *= multiplier
        if self.logger and self.logger.enabled:
            self.logger.info(
                "Magnet x%.2f applied to %d live pickups", multiplier, len(self._pickups)
            )
        return len(self._pickups)

    def update(
        self,
        dt: float,
        player: "Player",
        state: Optional["ProgressionState"] = None,
    ) -> PickupHaul:
        haul = PickupHaul()
        gold_bonus = state.gold_bonus_percent if state is not None else 0.0
        remaining: List[Pickup] = []
        for pickup in self._pickups:
            distance = pickup.position.distance_to(player.position)
            if distance <= pickup.magnet_range:
                pickup.attracted = True
            if pickup.attracted and distance > 0.0:
                step = min(pickup.pull_speed * dt, distance)
                pickup.position += (player.position - pickup.position).normalize() * step
                distance = pickup.position.distance_to(player.position)
            if distance <= self.collect_radius:
                if pickup.kind is PickupKind.XP:
                    haul.xp += pickup.value
                else:
                    haul.gold += int(round(pickup.value * (1.0 + gold_bonus / 100.0)))
                haul.collected += 1
                continue
            remaining.append(pickup)
        self._pickups = remaining
        if haul.collected and self.logger and self.logger.enabled:
            self.logger.debug("Collected %d pickups: xp=%d gold=%d", haul.collected, haul.xp, haul.gold)
        return haul

    def clear(self) -> None:
        self._pickups.clear()


__all__ = ["PickupKind", "Pickup", "PickupHaul", "PickupField", "COLLECT_RADIUS"]
