"""Headless run driver for the Pixel Vanguard progression core.

Plays a scripted run: the character levels up on a fixed XP curve and always
takes the first offered upgrade. Useful for eyeballing content and logs.
"""
from __future__ import annotations

import random
import sys
from pathlib import Path

from pygame.math import Vector2

from vanguard.assets.content import ContentManager
from vanguard.engine.logger import init_logger
from vanguard.engine.settings import ProgressionSettings, load_settings
from vanguard.player.loadout import ShopLevels
from vanguard.progression.session import RunSession
from vanguard.world.pickups import PickupKind


SETTINGS_PATH = Path("settings.json")
XP_PER_LEVEL = 5


def main() -> None:
    character_id = sys.argv[1] if len(sys.argv) > 1 else "knight"
    seconds = float(sys.argv[2]) if len(sys.argv) > 2 else 120.0

    raw = load_settings(SETTINGS_PATH)
    sim_hz = int(raw.get("simHz", 60))
    settings = ProgressionSettings.from_settings(SETTINGS_PATH)
    logger = init_logger(SETTINGS_PATH)

    content = ContentManager(settings.content_root, logger.channel("content"))
    content.load()

    rng = random.Random(raw.get("seed"))
    session = RunSession(
        content,
        content.characters.get(character_id),
        logger,
        shop_levels=ShopLevels(raw.get("shopLevels", {}), logger.channel("content")),
        settings=settings,
        rng=rng,
    )

    dt = 1.0 / sim_hz
    xp = 0
    elapsed = 0.0
    while elapsed < seconds and session.player.is_alive:
        elapsed += dt
        offers = session.process_commands()
        if offers:
            session.choose(offers[0])
            continue
        if rng.random() < 2.0 * dt:
            session.record_kill()
            kind = PickupKind.GOLD if rng.random() < 0.2 else PickupKind.XP
            offset = Vector2(rng.uniform(-6.0, 6.0), rng.uniform(-6.0, 6.0))
            session.pickups.spawn(kind, 1, session.player.position + offset)
        xp += session.tick(dt).xp
        while xp >= XP_PER_LEVEL:
            xp -= XP_PER_LEVEL
            session.request_level_up()

    stats = session.end()
    print(
        f"{character_id}: level {stats.level_reached}, {stats.upgrades_taken} upgrades, "
        f"{stats.kills} kills, {stats.gold_collected} gold in {stats.survival_time:.0f}s"
    )


if __name__ == "__main__":
    main()
