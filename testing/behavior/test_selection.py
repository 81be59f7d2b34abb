"""目标选择 (prioritize / find_closest) 测试。"""

from __future__ import annotations

from autofarm.behavior.avoidance import AvoidanceMemory
from autofarm.behavior.selection import RECENT_KILL_WINDOW_MS, find_closest, prioritize
from autofarm.data import Bounds, Point, Target
from autofarm.types import MobType, TargetType

CENTER = Point(400, 300)


def aggressive(x: int, y: int) -> Target:
    return Target(TargetType.aggressive_mob, Bounds(x, y, 40, 10))


def passive(x: int, y: int) -> Target:
    return Target(TargetType.passive_mob, Bounds(x, y, 40, 10))


def closest(mobs, **kwargs):
    params = dict(max_distance=325, screen_height=600, ignore_area_bottom=110)
    params.update(kwargs)
    return find_closest(mobs, CENTER, **params)


# ── prioritize ──


class TestPrioritize:
    def test_aggressive_over_passive(self):
        """1 主动 + 2 被动，无近期击杀：只保留主动怪。"""
        a = aggressive(100, 100)
        result = prioritize([passive(0, 0), a, passive(50, 50)], MobType.passive, 0)
        assert result == [a]

    def test_passive_when_no_aggressive(self):
        mobs = [passive(0, 0), passive(50, 50)]
        assert prioritize(mobs, MobType.aggressive, 0) == mobs

    def test_lone_aggressive_after_recent_aggressive_kill(self):
        p = passive(50, 50)
        result = prioritize([aggressive(0, 0), p], MobType.aggressive, 2000)
        assert result == [p]

    def test_window_expired(self):
        a = aggressive(0, 0)
        result = prioritize([a, passive(50, 50)], MobType.aggressive, RECENT_KILL_WINDOW_MS)
        assert result == [a]

    def test_two_aggressive_not_affected(self):
        mobs = [aggressive(0, 0), aggressive(10, 10)]
        assert prioritize(mobs + [passive(1, 1)], MobType.aggressive, 100) == mobs

    def test_last_kill_passive_not_affected(self):
        a = aggressive(0, 0)
        assert prioritize([a, passive(1, 1)], MobType.passive, 100) == [a]

    def test_marker_never_selected(self):
        marker = Target(TargetType.target_marker, Bounds(0, 0, 10, 10))
        assert prioritize([marker], MobType.passive, 0) == []

    def test_empty(self):
        assert prioritize([], MobType.passive, 0) == []


# ── find_closest ──


class TestFindClosest:
    def test_empty_returns_none(self):
        assert closest([]) is None

    def test_picks_nearest(self):
        near = aggressive(380, 250)   # 攻击点 (400, 290)
        far = aggressive(480, 250)    # 攻击点 (500, 290)
        assert closest([far, near]) == near

    def test_tie_keeps_first(self):
        left = aggressive(330, 250)   # 攻击点 (350, 290)
        right = aggressive(430, 250)  # 攻击点 (450, 290)
        assert closest([right, left]) == right

    def test_max_distance(self):
        mob = aggressive(0, 0)
        assert closest([mob]) is None
        assert closest([mob], max_distance=1000) == mob

    def test_ignore_bottom_area(self):
        # 攻击点 y = 450 + 10 + 30 = 490 = 600 - 110
        in_ui = aggressive(380, 450)
        assert closest([in_ui]) is None
        assert closest([in_ui], ignore_area_bottom=0) == in_ui

    def test_skips_avoided(self):
        memory = AvoidanceMemory()
        near = aggressive(380, 250)
        far = aggressive(480, 250)
        memory.push(Bounds(390, 255, 2, 2), now=0.0, ttl_ms=5000)
        assert closest([near, far], avoidance=memory, now=1.0) == far

    def test_expired_avoidance_ignored(self):
        memory = AvoidanceMemory()
        near = aggressive(380, 250)
        memory.push(near.bounds, now=0.0, ttl_ms=5000)
        assert closest([near], avoidance=memory, now=5.0) == near

    def test_all_avoided_returns_none(self):
        memory = AvoidanceMemory()
        mobs = [aggressive(380, 250), aggressive(480, 250)]
        memory.push(Bounds(300, 200, 300, 100), now=0.0, ttl_ms=5000)
        assert closest(mobs, avoidance=memory, now=0.0) is None
