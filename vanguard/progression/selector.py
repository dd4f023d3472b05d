"""Weighted level-up offers drawn from the eligible part of the catalog."""
from __future__ import annotations

import random
from typing import Iterable, List, Optional, Sequence

from vanguard.combat.roster import WeaponRoster
from vanguard.engine.errors import SamplingError
from vanguard.engine.logger import ChannelLogger
from vanguard.engine.settings import ProgressionSettings
from vanguard.progression.catalog import UpgradeDefinition
from vanguard.progression.state import PASSIVE_SLOT_CAP, ProgressionState
from vanguard.progression.validator import WeaponLookup, is_eligible


def weighted_sample(
    pool: Sequence[UpgradeDefinition],
    count: int,
    rng=random,
    *,
    strict: bool = False,
    logger: Optional[ChannelLogger] = None,
) -> List[UpgradeDefinition]:
    """Draw up to ``count`` entries with distinct ids, each weighted by rarity."""

    remaining = list(pool)
    picks: List[UpgradeDefinition] = []
    while remaining and len(picks) < count:
        total = sum(max(0, entry.rarity_weight) for entry in remaining)
        if total <= 0:
            if strict:
                raise SamplingError(
                    f"No positive rarity weight among {[entry.id for entry in remaining]}"
                )
            if logger:
                logger.warning("Zero total rarity weight; sampling uniformly")
            pick = rng.choice(remaining)
        else:
            roll = rng.randrange(total)
            running = 0
            pick = remaining[-1]
            for entry in remaining:
                running += max(0, entry.rarity_weight)
                if running > roll:
                    pick = entry
                    break
        picks.append(pick)
        # Same-id duplicates go with the pick.
        remaining = [entry for entry in remaining if entry.id != pick.id]
    return picks


def eligible_pool(
    catalog: Iterable[Optional[UpgradeDefinition]],
    state: ProgressionState,
    roster: WeaponRoster,
    *,
    passive_cap: int = PASSIVE_SLOT_CAP,
    weapon_known: Optional[WeaponLookup] = None,
    logger: Optional[ChannelLogger] = None,
) -> List[UpgradeDefinition]:
    return [
        definition
        for definition in catalog
        if is_eligible(
            definition,
            state,
            roster,
            passive_cap=passive_cap,
            weapon_known=weapon_known,
            logger=logger,
        )
    ]


def select(
    catalog: Iterable[Optional[UpgradeDefinition]],
    state: ProgressionState,
    roster: WeaponRoster,
    count: int = 3,
    rng=random,
    *,
    passive_cap: int = PASSIVE_SLOT_CAP,
    strict: bool = False,
    weapon_known: Optional[WeaponLookup] = None,
    logger: Optional[ChannelLogger] = None,
) -> List[UpgradeDefinition]:
    """Pick ``count`` offers; an empty list means nothing is eligible."""

    pool = eligible_pool(
        catalog, state, roster, passive_cap=passive_cap, weapon_known=weapon_known, logger=logger
    )
    if not pool:
        if logger:
            logger.warning("No eligible upgrades (%s)", state.describe(passive_cap))
        return []
    return weighted_sample(pool, count, rng, strict=strict, logger=logger)


class CandidateSelector:
    """``select`` bound to one run's settings, RNG and log channel."""

    def __init__(
        self,
        settings: ProgressionSettings,
        rng=None,
        logger: Optional[ChannelLogger] = None,
        weapon_known: Optional[WeaponLookup] = None,
    ) -> None:
        self.settings = settings
        self.rng = rng or random.Random()
        self.logger = logger
        self.weapon_known = weapon_known

    def select(
        self,
        catalog: Iterable[Optional[UpgradeDefinition]],
        state: ProgressionState,
        roster: WeaponRoster,
        count: Optional[int] = None,
    ) -> List[UpgradeDefinition]:
        offers = select(
            catalog,
            state,
            roster,
            self.settings.offer_count if count is None else count,
            self.rng,
            passive_cap=self.settings.passive_slot_cap,
            strict=self.settings.strict_sampling,
            weapon_known=self.weapon_known,
            logger=self.logger,
        )
        if self.logger and self.logger.enabled:
            self.logger.info("Offering %s", [offer.id for offer in offers])
        return offers


__all__ = ["CandidateSelector", "select", "eligible_pool", "weighted_sample"]
