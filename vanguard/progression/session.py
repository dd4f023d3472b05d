"""One run: owns the progression state and drives level-up offers."""
from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional, TYPE_CHECKING

from vanguard.combat.roster import WeaponRoster
from vanguard.combat.weapons import WeaponFactory, WeaponHandle
from vanguard.engine.errors import ContentError
from vanguard.engine.logger import GameLogger
from vanguard.engine.settings import ProgressionSettings
from vanguard.player.loadout import CharacterData, ShopLevels, build_player, starting_stats
from vanguard.progression.applicator import EffectApplicator
from vanguard.progression.catalog import UpgradeDefinition
from vanguard.progression.selector import CandidateSelector
from vanguard.progression.state import ProgressionState
from vanguard.world.pickups import PickupField, PickupHaul

if TYPE_CHECKING:
    from vanguard.assets.content import ContentManager


@dataclass
class RunStats:
    kills: int = 0
    gold_collected: int = 0
    xp_collected: int = 0
    level_reached: int = 1
    upgrades_taken: int = 0
    survival_time: float = 0.0


@dataclass(frozen=True)
class LevelUp:
    """Queued when the player crosses an XP threshold."""


class RunSession:
    """Run-scoped container created at run start and dropped at run end."""

    def __init__(
        self,
        content: "ContentManager",
        character: CharacterData,
        logger: GameLogger,
        shop_levels: Optional[ShopLevels] = None,
        settings: Optional[ProgressionSettings] = None,
        rng: Optional[random.Random] = None,
        on_weapon_spawn: Optional[Callable[[WeaponHandle], None]] = None,
    ) -> None:
        self.content = content
        self.character = character
        self.settings = settings or ProgressionSettings()
        self.shop_levels = shop_levels or ShopLevels()
        self._log = logger.channel("session")
        self.stats = RunStats()
        baseline = starting_stats(character, self.shop_levels)
        self.player = build_player(baseline)
        self.state = ProgressionState()
        self.roster = WeaponRoster(self.settings.roster_capacity)
        self.pickups = PickupField(
            base_magnet_range=baseline.magnet_range,
            logger=logger.channel("pickups"),
        )
        self.factory = WeaponFactory(content.weapons, on_weapon_spawn)
        self.applicator = EffectApplicator(
            self.factory,
            self.pickups,
            self.settings,
            logger.channel("upgrades"),
            logger.channel("weapons"),
        )
        self.selector = CandidateSelector(
            self.settings, rng, logger.channel("upgrades"), self.factory.knows
        )
        self.pending_offer: Optional[List[UpgradeDefinition]] = None
        self._commands: Deque[LevelUp] = deque()
        self.ended = False

        if not self.applicator.equip(character.starter_weapon, self.state, self.roster):
            raise ContentError(
                f"Starter weapon '{character.starter_weapon}' for '{character.id}' could not be equipped"
            )
        if self._log.enabled:
            self._log.info(
                "Run started as %s: hp=%.0f speed=%.2f dmg=x%.2f magnet=%.2f",
                character.name,
                self.player.max_hp,
                self.player.move_speed,
                self.player.damage_multiplier,
                baseline.magnet_range,
            )

    # ------------------------------------------------------------------
    # Level-up flow
    # ------------------------------------------------------------------
    @property
    def paused(self) -> bool:
        return self.pending_offer is not None

    def request_level_up(self) -> None:
        if self.ended:
            return
        self._commands.append(LevelUp())

    def queued_level_ups(self) -> int:
        return len(self._commands)

    def process_commands(self) -> Optional[List[UpgradeDefinition]]:
        """Drain at most one queued level-up; call once per frame."""

        if self.pending_offer is not None:
            return self.pending_offer
        if not self._commands:
            return None
        self._commands.popleft()
        self.stats.level_reached += 1
        offers = self.selector.select(self.content.upgrades, self.state, self.roster)
        if not offers:
            self._log.warning("Level %d: nothing to offer, resuming play", self.stats.level_reached)
            return None
        self.pending_offer = offers
        return offers

    def choose(self, definition: UpgradeDefinition) -> bool:
        if self.pending_offer is None:
            self._log.warning("No pending offer; ignoring choice %s", getattr(definition, "id", None))
            return False
        offered_ids = [offer.id for offer in self.pending_offer]
        if getattr(definition, "id", None) not in offered_ids:
            self._log.warning("%s was not offered (%s)", getattr(definition, "id", None), offered_ids)
            return False
        self.pending_offer = None
        applied = self.applicator.apply(definition, self.state, self.roster, self.player)
        if applied:
            self.stats.upgrades_taken += 1
        return applied

    def decline(self) -> None:
        self.pending_offer = None

    # ------------------------------------------------------------------
    # Per-frame hooks
    # ------------------------------------------------------------------
    def tick(self, dt: float) -> PickupHaul:
        if self.paused or self.ended:
            return PickupHaul()
        self.stats.survival_time += dt
        haul = self.pickups.update(dt, self.player, self.state)
        self.stats.xp_collected += haul.xp
        self.stats.gold_collected += haul.gold
        return haul

    def record_kill(self) -> int:
        self.stats.kills += 1
        return self.stats.kills

    def weapon_damage(self, handle: WeaponHandle) -> float:
        return handle.capability.effective_damage(self.player.damage_multiplier)

    def lifesteal_heal(self, damage_dealt: float) -> float:
        percent = self.state.lifesteal_percent
        if percent <= 0.0 or damage_dealt <= 0.0:
            return 0.0
        return self.player.heal(damage_dealt * percent / 100.0)

    def end(self) -> RunStats:
        self.roster.clear()
        self.pickups.clear()
        self._commands.clear()
        self.pending_offer = None
        self.ended = True
        if self._log.enabled:
            self._log.info(
                "Run over: level %d, %d kills, %d gold, %.0fs",
                self.stats.level_reached,
                self.stats.kills,
                self.stats.gold_collected,
                self.stats.survival_time,
            )
        return self.stats


__all__ = ["RunSession", "RunStats", "LevelUp"]
