"""Asset loading entry point."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from vanguard.combat.weapons import WeaponDatabase
from vanguard.engine.logger import ChannelLogger
from vanguard.player.loadout import CharacterDatabase
from vanguard.progression.catalog import UpgradeCatalog


class ContentManager:
    def __init__(self, root: Path, logger: Optional[ChannelLogger] = None) -> None:
        self.root = root
        self.logger = logger
        self.upgrades = UpgradeCatalog()
        self.weapons = WeaponDatabase()
        self.characters = CharacterDatabase()

    def load(self) -> None:
        data = self.root / "data"
        self.weapons.load_directory(data / "weapons", self.logger)
        self.characters.load_directory(data / "characters", self.logger)
        self.upgrades.load_directory(data / "upgrades", self.logger)
        if self.logger and self.logger.enabled:
            self.logger.info(
                "Loaded %d upgrades, %d weapons, %d characters from %s",
                len(self.upgrades),
                len(self.weapons.weapons),
                len(self.characters.characters),
                data,
            )


__all__ = ["ContentManager"]
