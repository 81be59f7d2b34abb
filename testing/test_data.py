"""测试几何值类型、目标与枚举。"""

from __future__ import annotations

import pytest

from autofarm.data import ATTACK_OFFSET_Y, Bounds, Point, Target
from autofarm.types import MobType, RotationDirection, SlotType, TargetType


class TestPoint:
    def test_distance(self):
        assert Point(0, 0).distance_to(Point(3, 4)) == 5
        assert Point(1, 1).distance_to(Point(1, 1)) == 0

    def test_hashable(self):
        assert len({Point(1, 2), Point(1, 2)}) == 1


class TestBounds:
    def test_negative_size_rejected(self):
        with pytest.raises(ValueError):
            Bounds(0, 0, -1, 5)

    def test_to_tuple(self):
        assert Bounds(1, 2, 3, 4).to_tuple() == (1, 2, 3, 4)

    def test_around(self):
        assert Bounds.around(Point(10, 20), 1) == Bounds(9, 19, 2, 2)

    def test_grow_by(self):
        b = Bounds(10, 10, 2, 2).grow_by(5)
        assert b == Bounds(5, 5, 12, 12)

    def test_edges(self):
        b = Bounds(10, 20, 40, 10)
        assert (b.right, b.bottom) == (50, 30)
        assert b.lowest_center == Point(30, 30)

    def test_intersects(self):
        a = Bounds(0, 0, 10, 10)
        assert a.intersects(Bounds(5, 5, 10, 10))
        assert a.intersects(Bounds(10, 0, 5, 5))
        assert not a.intersects(Bounds(11, 0, 5, 5))
        assert not a.intersects(Bounds(0, 20, 5, 5))


class TestTarget:
    def test_attack_coords(self):
        mob = Target(TargetType.aggressive_mob, Bounds(400, 300, 60, 12))
        assert mob.attack_coords == Point(430, 312 + ATTACK_OFFSET_Y)

    def test_avoid_coords(self):
        mob = Target(TargetType.aggressive_mob, Bounds(400, 300, 60, 12))
        assert mob.active_avoid_coords(100) == Point(430, 312 + ATTACK_OFFSET_Y + 100)

    def test_mob_type(self):
        assert Target(TargetType.aggressive_mob, Bounds(0, 0, 1, 1)).mob_type is MobType.aggressive
        assert Target(TargetType.passive_mob, Bounds(0, 0, 1, 1)).is_passive
        marker = Target(TargetType.target_marker, Bounds(0, 0, 1, 1))
        assert marker.mob_type is None
        assert not marker.is_aggressive and not marker.is_passive


class TestEnums:
    def test_invalid_value_message(self):
        with pytest.raises(ValueError, match="SlotType"):
            SlotType("Teleport")

    def test_restoration_slots(self):
        assert SlotType.food.is_restoration
        assert SlotType.fp_restorer.is_restoration
        assert not SlotType.pickup_pet.is_restoration

    def test_rotation_keys(self):
        assert RotationDirection.left.key == "ArrowLeft"
        assert RotationDirection.right.key == "ArrowRight"
