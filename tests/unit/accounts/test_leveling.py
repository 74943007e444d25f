from __future__ import annotations

import pytest

from modules.accounts.leveling import calculate_level, xp_for_level, xp_progress

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "xp, level",
    [(0, 1), (99, 1), (100, 2), (399, 2), (400, 3), (899, 3), (900, 4), (10_000, 11)],
)
def test_calculate_level(xp, level):
    assert calculate_level(xp) == level


@pytest.mark.parametrize("level, xp", [(1, 0), (2, 100), (3, 400), (4, 900)])
def test_xp_for_level(level, xp):
    assert xp_for_level(level) == xp


def test_level_threshold_round_trip():
    for level in range(1, 20):
        assert calculate_level(xp_for_level(level)) == level
        assert calculate_level(xp_for_level(level + 1) - 1) == level


def test_xp_progress_inside_level():
    progress = xp_progress(250)

    assert progress.level == 2
    assert progress.current == 150
    assert progress.needed == 300
    assert progress.percent == 50.0


def test_xp_progress_at_level_start():
    progress = xp_progress(400)
    assert progress.level == 3
    assert progress.current == 0
    assert progress.percent == 0.0
