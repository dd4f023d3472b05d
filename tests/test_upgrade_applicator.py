from __future__ import annotations

import random

import pytest
from pygame.math import Vector2

from vanguard.combat.effects import WeaponEffect
from vanguard.combat.roster import WeaponRoster
from vanguard.combat.weapons import WeaponData, WeaponDatabase, WeaponFactory, WeaponKind
from vanguard.engine.logger import quiet_logger
from vanguard.engine.settings import ProgressionSettings
from vanguard.player.player import Player
from vanguard.progression.applicator import EffectApplicator
from vanguard.progression.catalog import (
    PassiveEffect,
    UpgradeCatalog,
    UpgradeCategory,
    UpgradeDefinition,
)
from vanguard.progression.selector import select
from vanguard.progression.state import ProgressionState
from vanguard.world.pickups import PickupField, PickupKind

WEAPONS = [
    {"id": "greatsword", "kind": "greatsword", "baseDamage": 15, "cooldown": 1.2},
    {"id": "auto_crossbow", "kind": "crossbow", "baseDamage": 8, "cooldown": 0.9},
    {"id": "holy_water", "kind": "holy_water", "baseDamage": 4, "cooldown": 2.5},
    {"id": "magic_orbitals", "kind": "magic_orbitals", "baseDamage": 6, "cooldown": 4.0},
    {"id": "spare_crossbow", "kind": "crossbow", "baseDamage": 5, "cooldown": 1.0},
]


def _database() -> WeaponDatabase:
    database = WeaponDatabase()
    for entry in WEAPONS:
        database.add(WeaponData.from_dict(entry))
    return database


def _setup(*weapon_ids: str, pickups: PickupField = None):
    applicator = EffectApplicator(
        WeaponFactory(_database()),
        pickups if pickups is not None else PickupField(),
        ProgressionSettings(),
        quiet_logger().channel("upgrades"),
        quiet_logger().channel("weapons"),
    )
    state = ProgressionState()
    roster = WeaponRoster()
    for weapon_id in weapon_ids:
        assert applicator.equip(weapon_id, state, roster)
    return applicator, state, roster, Player(max_hp=100, move_speed=5.0)


def _new_weapon(weapon_id: str) -> UpgradeDefinition:
    return UpgradeDefinition(f"unlock_{weapon_id}", UpgradeCategory.NEW_WEAPON, weapon_id=weapon_id)


def _weapon_upgrade(upgrade_id: str, kind: WeaponKind, effect: WeaponEffect, magnitude: float) -> UpgradeDefinition:
    return UpgradeDefinition(
        upgrade_id,
        UpgradeCategory.WEAPON_SPECIFIC,
        magnitude=magnitude,
        weapon_kind=kind,
        weapon_effect=effect,
    )


def _passive(upgrade_id: str, passive: PassiveEffect, magnitude: float) -> UpgradeDefinition:
    return UpgradeDefinition(upgrade_id, UpgradeCategory.PASSIVE, magnitude=magnitude, passive=passive)


def test_max_hp_is_repeatable_and_untracked() -> None:
    applicator, state, roster, player = _setup("greatsword")
    player.take_damage(30)
    vital_heart = UpgradeDefinition("vital_heart", UpgradeCategory.PLAYER_MAX_HP, magnitude=10)
    applied_before = set(state.applied_non_repeatable)

    assert applicator.apply(vital_heart, state, roster, player)
    assert player.max_hp == pytest.approx(110)
    assert player.hp == pytest.approx(80)
    assert applicator.apply(vital_heart, state, roster, player)
    assert player.max_hp == pytest.approx(120)
    assert player.hp == pytest.approx(90)
    assert state.applied_non_repeatable == applied_before


def test_move_speed_is_percentage() -> None:
    applicator, state, roster, player = _setup()
    swift = UpgradeDefinition("swift_boots", UpgradeCategory.PLAYER_MOVE_SPEED, magnitude=10)
    applicator.apply(swift, state, roster, player)
    applicator.apply(swift, state, roster, player)
    assert player.get_move_speed() == pytest.approx(5.0 * 1.1 * 1.1)


def test_global_damage_compounds_on_every_weapon() -> None:
    applicator, state, roster, player = _setup("greatsword", "auto_crossbow")
    whetstone = UpgradeDefinition("whetstone", UpgradeCategory.WEAPON_DAMAGE_GLOBAL, magnitude=15)
    applicator.apply(whetstone, state, roster, player)
    applicator.apply(whetstone, state, roster, player)
    sword = roster.get("greatsword").capability
    crossbow = roster.get("auto_crossbow").capability
    assert sword.damage == pytest.approx(15 * 1.15 ** 2)
    assert crossbow.damage == pytest.approx(8 * 1.15 ** 2)
    assert sword.effective_damage(1.1) == pytest.approx(15 * 1.15 ** 2 * 1.1)


def test_cooldown_never_drops_below_floor() -> None:
    applicator, state, roster, player = _setup("greatsword", "auto_crossbow", "magic_orbitals")
    quick_hands = UpgradeDefinition("quick_hands", UpgradeCategory.WEAPON_ATTACK_SPEED_GLOBAL, magnitude=25)
    for _ in range(20):
        applicator.apply(quick_hands, state, roster, player)
        for handle in roster:
            assert handle.capability.cooldown >= 0.5
    for handle in roster:
        assert handle.capability.cooldown == pytest.approx(0.5)


def test_cooldown_one_step_is_multiplicative() -> None:
    applicator, state, roster, player = _setup("magic_orbitals")
    quick_hands = UpgradeDefinition("quick_hands", UpgradeCategory.WEAPON_ATTACK_SPEED_GLOBAL, magnitude=10)
    applicator.apply(quick_hands, state, roster, player)
    assert roster.get("magic_orbitals").capability.cooldown == pytest.approx(3.6)


def test_new_weapon_appends_and_tracks() -> None:
    spawned = []
    applicator, state, roster, player = _setup("greatsword")
    applicator.factory = WeaponFactory(_database(), spawned.append)
    unlock = _new_weapon("auto_crossbow")

    assert applicator.apply(unlock, state, roster, player)
    assert [handle.id for handle in roster] == ["greatsword", "auto_crossbow"]
    assert state.has_weapon("auto_crossbow")
    assert state.has_upgrade("unlock_auto_crossbow")
    assert [handle.id for handle in spawned] == ["auto_crossbow"]


def test_new_weapon_on_full_roster_is_a_noop() -> None:
    applicator, state, roster, player = _setup("greatsword", "auto_crossbow", "holy_water", "magic_orbitals")
    before = roster.snapshot()
    assert not applicator.apply(_new_weapon("spare_crossbow"), state, roster, player)
    assert roster.snapshot() == before
    assert not state.has_weapon("spare_crossbow")
    assert not state.has_upgrade("unlock_spare_crossbow")


def test_duplicate_and_unknown_weapons_are_noops() -> None:
    applicator, state, roster, player = _setup("greatsword")
    assert not applicator.apply(_new_weapon("greatsword"), state, roster, player)
    assert not applicator.apply(_new_weapon("lightning_ring"), state, roster, player)
    assert len(roster) == 1


def test_weapon_specific_touches_only_matching_kind() -> None:
    applicator, state, roster, player = _setup("greatsword", "auto_crossbow", "spare_crossbow")
    pierce = _weapon_upgrade("crossbow_pierce", WeaponKind.CROSSBOW, WeaponEffect.PIERCE, 1)
    assert applicator.apply(pierce, state, roster, player)
    assert roster.get("auto_crossbow").capability.params.pierce_count == 1
    assert roster.get("spare_crossbow").capability.params.pierce_count == 1
    assert roster.get("greatsword").capability.params.swing_count == 1
    assert state.has_upgrade("crossbow_pierce")


def test_weapon_specific_without_match_is_not_an_error() -> None:
    applicator, state, roster, player = _setup("greatsword")
    radius = _weapon_upgrade("holy_water_radius", WeaponKind.HOLY_WATER, WeaponEffect.PUDDLE_RADIUS, 1.4)
    assert applicator.apply(radius, state, roster, player)
    assert roster.get("greatsword").capability.damage == pytest.approx(15)


def test_multi_shot_tiers_raise_projectile_count() -> None:
    applicator, state, roster, player = _setup("auto_crossbow")
    dual = _weapon_upgrade("crossbow_dual_shot", WeaponKind.CROSSBOW, WeaponEffect.MULTI_SHOT, 2)
    triple = UpgradeDefinition(
        "crossbow_triple_shot",
        UpgradeCategory.WEAPON_SPECIFIC,
        magnitude=3,
        prerequisite="crossbow_dual_shot",
        weapon_kind=WeaponKind.CROSSBOW,
        weapon_effect=WeaponEffect.MULTI_SHOT,
    )
    applicator.apply(dual, state, roster, player)
    assert roster.get("auto_crossbow").capability.params.projectile_count == 2
    applicator.apply(triple, state, roster, player)
    assert roster.get("auto_crossbow").capability.params.projectile_count == 3


def test_holy_water_and_orbital_effects() -> None:
    applicator, state, roster, player = _setup("holy_water", "magic_orbitals")
    for definition in (
        _weapon_upgrade("holy_water_radius", WeaponKind.HOLY_WATER, WeaponEffect.PUDDLE_RADIUS, 1.4),
        _weapon_upgrade("holy_water_scaling", WeaponKind.HOLY_WATER, WeaponEffect.HP_SCALING, 0.06),
        _weapon_upgrade("holy_water_duration", WeaponKind.HOLY_WATER, WeaponEffect.PUDDLE_DURATION, 2.0),
        _weapon_upgrade("orbitals_expanded_orbit", WeaponKind.MAGIC_ORBITALS, WeaponEffect.ORBIT_RADIUS, 1.4),
        _weapon_upgrade("orbitals_overcharged", WeaponKind.MAGIC_ORBITALS, WeaponEffect.OVERCHARGE, 1.3),
    ):
        assert applicator.apply(definition, state, roster, player)
    water = roster.get("holy_water").capability.params
    orbitals = roster.get("magic_orbitals").capability
    assert water.puddle_radius == pytest.approx(1.5 * 1.4)
    assert water.hp_scaling == pytest.approx(0.06)
    assert water.puddle_duration == pytest.approx(6.0)
    assert orbitals.params.orbit_radius == pytest.approx(2.5 * 1.4)
    assert orbitals.damage == pytest.approx(6 * 1.3)


def test_lifesteal_and_gold_bonus_accumulate() -> None:
    applicator, state, roster, player = _setup()
    applicator.apply(_passive("passive_lifesteal", PassiveEffect.LIFESTEAL, 3), state, roster, player)
    applicator.apply(_passive("passive_lucky_coin", PassiveEffect.LUCKY_COIN, 40), state, roster, player)
    assert state.lifesteal_percent == pytest.approx(3)
    assert state.gold_bonus_percent == pytest.approx(40)
    assert state.passive_slot_count == 2


def test_magnet_broadcasts_to_live_pickups_only() -> None:
    pickups = PickupField(base_magnet_range=3.0, logger=quiet_logger().channel("pickups"))
    early = pickups.spawn(PickupKind.XP, 1, Vector2(20, 0))
    applicator, state, roster, player = _setup(pickups=pickups)
    applicator.apply(_passive("passive_magnet", PassiveEffect.MAGNET, 1.5), state, roster, player)
    late = pickups.spawn(PickupKind.GOLD, 1, Vector2(-20, 0))
    assert early.magnet_range == pytest.approx(4.5)
    assert late.magnet_range == pytest.approx(3.0)
    assert state.passive_slot_count == 1


def test_passive_over_cap_is_a_noop() -> None:
    applicator, state, roster, player = _setup()
    state.passive_slot_count = 3
    lifesteal = _passive("passive_lifesteal", PassiveEffect.LIFESTEAL, 3)
    assert not applicator.apply(lifesteal, state, roster, player)
    assert state.passive_slot_count == 3
    assert state.lifesteal_percent == 0.0
    assert not state.has_upgrade("passive_lifesteal")


def test_null_and_malformed_definitions_do_nothing() -> None:
    applicator, state, roster, player = _setup("greatsword")
    broken = UpgradeDefinition("broken", UpgradeCategory.WEAPON_SPECIFIC, magnitude=2)
    assert not applicator.apply(None, state, roster, player)
    assert not applicator.apply(broken, state, roster, player)
    assert not state.has_upgrade("broken")


@pytest.mark.parametrize("junk", [{"id": "junk"}, "junk", 42])
def test_non_definitions_are_refused(junk) -> None:
    applicator, state, roster, player = _setup("greatsword")
    before = (set(state.applied_non_repeatable), state.passive_slot_count, player.max_hp)
    assert not applicator.apply(junk, state, roster, player)
    assert (set(state.applied_non_repeatable), state.passive_slot_count, player.max_hp) == before
    assert [handle.id for handle in roster] == ["greatsword"]


def test_random_sequences_keep_caps() -> None:
    definitions = [
        UpgradeDefinition("vital_heart", UpgradeCategory.PLAYER_MAX_HP, magnitude=10),
        UpgradeDefinition("quick_hands", UpgradeCategory.WEAPON_ATTACK_SPEED_GLOBAL, magnitude=10),
        _new_weapon("greatsword"),
        _new_weapon("auto_crossbow"),
        _new_weapon("holy_water"),
        _new_weapon("magic_orbitals"),
        _new_weapon("spare_crossbow"),
        _weapon_upgrade("crossbow_pierce", WeaponKind.CROSSBOW, WeaponEffect.PIERCE, 1),
        _passive("passive_lifesteal", PassiveEffect.LIFESTEAL, 3),
        _passive("passive_magnet", PassiveEffect.MAGNET, 1.5),
        _passive("passive_lucky_coin", PassiveEffect.LUCKY_COIN, 40),
        _passive("passive_second_wind", PassiveEffect.LIFESTEAL, 2),
    ]
    catalog = UpgradeCatalog(definitions)
    rng = random.Random(2024)
    for _ in range(25):
        applicator, state, roster, player = _setup()
        for _ in range(30):
            offers = select(catalog, state, roster, 3, rng)
            if not offers:
                break
            applicator.apply(rng.choice(offers), state, roster, player)
            assert len(roster) <= 4
            assert 0 <= state.passive_slot_count <= 3
            assert len(state.equipped_weapon_ids) == len(roster)
        # Forcing ineligible picks must not break the caps either.
        for definition in definitions:
            applicator.apply(definition, state, roster, player)
        assert len(roster) <= 4
        assert state.passive_slot_count <= 3
