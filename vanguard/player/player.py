"""Player entity: the stat sink progression writes into."""
from __future__ import annotations

from typing import Optional

from pygame.math import Vector2


class Player:
    """Runtime player instance."""

    def __init__(
        self,
        max_hp: float,
        move_speed: float,
        damage_multiplier: float = 1.0,
        position: Optional[Vector2] = None,
    ) -> None:
        self.max_hp = float(max_hp)
        self.hp = float(max_hp)
        self.move_speed = float(move_speed)
        # Character and shop bonus, applied when weapon damage is read.
        self.damage_multiplier = float(damage_multiplier)
        self.position = Vector2(position) if position is not None else Vector2(0.0, 0.0)

    @property
    def is_alive(self) -> bool:
        return self.hp > 0.0

    def get_move_speed(self) -> float:
        return self.move_speed

    def set_move_speed(self, value: float) -> None:
        self.move_speed = max(0.0, float(value))

    def increase_max_hp(self, amount: float) -> None:
        self.max_hp += amount
        self.hp += amount

    def heal(self, amount: float) -> float:
        if amount <= 0.0 or not self.is_alive:
            return 0.0
        before = self.hp
        self.hp = min(self.max_hp, self.hp + amount)
        return self.hp - before

    def take_damage(self, amount: float) -> float:
        if amount <= 0.0:
            return 0.0
        before = self.hp
        self.hp = max(0.0, self.hp - amount)
        return before - self.hp


__all__ = ["Player"]
