"""刷怪状态定义测试。"""

from __future__ import annotations

import dataclasses

import pytest

from autofarm.behavior.state import (
    AfterEnemyKill,
    Attacking,
    EnemyFound,
    NoEnemyFound,
    SearchingForEnemy,
)
from autofarm.data import Bounds, Target
from autofarm.types import TargetType

MOB = Target(TargetType.passive_mob, Bounds(1, 2, 3, 4))


class TestEngagementState:
    def test_equality_by_payload(self):
        assert EnemyFound(MOB) == EnemyFound(MOB)
        assert EnemyFound(MOB) != Attacking(MOB)
        assert NoEnemyFound() == NoEnemyFound()
        assert NoEnemyFound() != SearchingForEnemy()

    def test_immutable(self):
        state = Attacking(MOB)
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.target = MOB  # type: ignore[misc]

    def test_str(self):
        assert str(SearchingForEnemy()) == "SearchingForEnemy"
        assert str(AfterEnemyKill(MOB)) == "AfterEnemyKill(Bounds(x=1, y=2, w=3, h=4))"

    def test_match_payload(self):
        match Attacking(MOB):
            case Attacking(target=target):
                assert target is MOB
            case _:
                pytest.fail("未匹配")
