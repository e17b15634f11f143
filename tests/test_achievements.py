"""Tests for habitcore/achievements.py — levels and badges."""

import pytest

from habitcore.achievements import (
    ACHIEVEMENTS,
    Tier,
    achievement_progress,
    level_info,
    unlocked_achievements,
)


def test_level_info_start():
    info = level_info(0)
    assert info.level == 1
    assert info.title == "Beginner"
    assert info.next_requirement == 5
    assert info.progress == 0.0


def test_level_info_midway():
    info = level_info(10)
    assert info.level == 2
    assert info.title == "Novice"
    assert info.next_requirement == 15
    assert info.progress == pytest.approx(0.5)


def test_level_info_max():
    info = level_info(1500)
    assert info.level == 10
    assert info.title == "Habit God"
    assert info.progress == 1.0


def test_achievement_catalogue():
    assert len(ACHIEVEMENTS) == 14
    assert ACHIEVEMENTS[0].tier is Tier.BRONZE
    assert len({a.title for a in ACHIEVEMENTS}) == 14


def test_fresh_store_unlocks_organizer_only(store):
    # Eight default categories already satisfy "Organizer"
    titles = [a.title for a in unlocked_achievements(store)]
    assert titles == ["Organizer"]


def test_first_step_and_perfect_day(store, make_habit):
    for title in ("A", "B", "C"):
        store.add_habit(make_habit(title, done=(0,)))
    titles = {a.title for a in unlocked_achievements(store)}
    assert {"First Step", "Getting Started", "Perfect Day"} <= titles
    assert "Week Warrior" not in titles


def test_achievement_progress(store, make_habit):
    store.add_habit(make_habit("A", done=(0, 1, 2)))
    progress = achievement_progress(store)
    assert len(progress) == 14
    assert progress["First Step"] == 1.0
    assert progress["Week Warrior"] == pytest.approx(3 / 7)
    assert progress["Getting Started"] == pytest.approx(1 / 3)
