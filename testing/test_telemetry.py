"""测试遥测数据契约。"""

from __future__ import annotations

from autofarm.data import Bounds, Point, Target
from autofarm.telemetry import ClientStats, StatInfo, Telemetry
from autofarm.types import TargetType


class TestStatInfo:
    def test_first_reading_sets_time(self):
        stat = StatInfo()
        assert stat.elapsed_ms(5.0) is None
        assert stat.update(0, 1.0)
        assert stat.last_update_time == 1.0

    def test_unchanged_keeps_time(self):
        stat = StatInfo()
        stat.update(50, 1.0)
        assert not stat.update(50, 3.0)
        assert stat.elapsed_ms(3.0) == 2000

    def test_changed_refreshes_time(self):
        stat = StatInfo()
        stat.update(50, 1.0)
        assert stat.update(40, 3.0)
        assert stat.value == 40
        assert stat.elapsed_ms(3.5) == 500

    def test_missing_reading_is_zero(self):
        stat = StatInfo()
        stat.update(None, 1.0)
        assert stat.value == 0

    def test_reset(self):
        stat = StatInfo()
        stat.update(50, 1.0)
        stat.reset_last_update_time(4.0)
        assert stat.elapsed_ms(4.0) == 0


class TestClientStats:
    def test_update_all_fields(self):
        marker = Target(TargetType.target_marker, Bounds(0, 0, 5, 5))
        stats = ClientStats()
        stats.update(2.0, hp=90, mp=80, fp=70, target_hp=60, target_mp=50, target_marker=marker)
        assert (stats.hp.value, stats.mp.value, stats.fp.value) == (90, 80, 70)
        assert (stats.target_hp.value, stats.target_mp.value) == (60, 50)
        assert stats.target_marker == marker

    def test_absent_fields_become_zero(self):
        stats = ClientStats()
        stats.update(1.0, target_hp=60, target_mp=50)
        stats.update(2.0)
        assert stats.target_hp.value == 0
        assert stats.target_hp.last_update_time == 2.0
        assert stats.target_marker is None


class TestTelemetry:
    def test_defaults(self):
        telemetry = Telemetry()
        assert telemetry.mobs == []
        assert telemetry.frame is None
        assert telemetry.screen_center == Point(400, 300)

    def test_custom_screen(self):
        assert Telemetry(screen_width=1024, screen_height=768).screen_center == Point(512, 384)
