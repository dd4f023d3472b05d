"""Ordered, capacity-limited collection of equipped weapons."""
from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from vanguard.combat.weapons import WeaponHandle, WeaponKind
from vanguard.engine.errors import RosterCapacityError

DEFAULT_CAPACITY = 4


class WeaponRoster:
    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self.capacity = capacity
        self._handles: List[WeaponHandle] = []

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[WeaponHandle]:
        # Iterate a snapshot so an add during traversal can't skew it.
        return iter(self.snapshot())

    def snapshot(self) -> Tuple[WeaponHandle, ...]:
        return tuple(self._handles)

    @property
    def is_full(self) -> bool:
        return len(self._handles) >= self.capacity

    def contains(self, weapon_id: str) -> bool:
        return self.get(weapon_id) is not None

    def get(self, weapon_id: str) -> Optional[WeaponHandle]:
        for handle in self._handles:
            if handle.id == weapon_id:
                return handle
        return None

    def has_kind(self, kind: WeaponKind) -> bool:
        return any(handle.kind is kind for handle in self._handles)

    def of_kind(self, kind: WeaponKind) -> Tuple[WeaponHandle, ...]:
        return tuple(handle for handle in self._handles if handle.kind is kind)

    def add(self, handle: WeaponHandle) -> None:
        if self.is_full:
            raise RosterCapacityError(
                f"Roster full ({self.capacity}); cannot add '{handle.id}'"
            )
        if self.contains(handle.id):
            raise RosterCapacityError(f"Weapon '{handle.id}' already equipped")
        self._handles.append(handle)

    def clear(self) -> None:
        """Run teardown only."""

        self._handles.clear()


__all__ = ["WeaponRoster", "DEFAULT_CAPACITY"]
