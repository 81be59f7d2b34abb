"""空闲搜索 (IdleSearch) 测试。"""

from __future__ import annotations

import pytest

from autofarm.behavior.search import MAX_ROTATION_TRIES, IdleSearch
from autofarm.behavior.state import NoEnemyFound, SearchingForEnemy
from autofarm.infra.exceptions import InactivityTimeoutError
from autofarm.types import KeyMode


@pytest.fixture
def search(movement, clock) -> IdleSearch:
    return IdleSearch(movement, clock)


class TestRotation:
    def test_each_step_increments_once(self, search, controller):
        for expected in range(1, MAX_ROTATION_TRIES + 1):
            assert search.step(0, 0) == SearchingForEnemy()
            assert search.rotation_tries == expected
        assert controller.send_key.call_count == MAX_ROTATION_TRIES * 2

    def test_rotates_right(self, search, controller):
        search.step(0, 0)
        assert controller.send_key.call_args_list[0].args == ("ArrowRight", KeyMode.hold)
        assert controller.send_key.call_args_list[1].args == ("ArrowRight", KeyMode.release)

    def test_exhausted_without_circle_idles(self, search, controller):
        """30 次旋转后第 31 次调用：计数归零，不发出任何移动。"""
        for _ in range(MAX_ROTATION_TRIES):
            search.step(0, 0)
        controller.reset_mock()

        assert search.step(0, 0) == NoEnemyFound()
        assert search.rotation_tries == 0
        controller.send_key.assert_not_called()

    def test_exhausted_with_circle_moves(self, search, controller):
        for _ in range(MAX_ROTATION_TRIES):
            search.step(0, 0)
        controller.reset_mock()

        assert search.step(0, 300) == SearchingForEnemy()
        keys = [c.args for c in controller.send_key.call_args_list]
        assert keys == [
            ("W", KeyMode.hold),
            ("Space", KeyMode.hold),
            ("D", KeyMode.hold),
            ("D", KeyMode.release),
            ("Space", KeyMode.release),
            ("W", KeyMode.release),
            ("S", KeyMode.hold),
            ("S", KeyMode.release),
        ]
        assert search.rotation_tries == MAX_ROTATION_TRIES

    def test_reset_rotation(self, search):
        search.step(0, 0)
        search.reset_rotation()
        assert search.rotation_tries == 0


class TestCircleDuration:
    def test_strafe_held_for_configured_duration(self, controller, clock):
        from autofarm.control.movement import MovementAccessor

        slept: list[float] = []
        search = IdleSearch(MovementAccessor(controller, sleep=slept.append), clock)
        search.move_circle_pattern(250)
        assert slept == [0.25, 0.02, 0.05]


class TestInactivity:
    def test_first_entry_starts_timer(self, search, clock):
        search.step(1000, 0)
        assert search.no_enemy_since == clock()

    def test_timeout_raises(self, search, clock):
        search.step(1000, 0)
        clock.advance_ms(1001)
        with pytest.raises(InactivityTimeoutError) as exc_info:
            search.step(1000, 0)
        assert exc_info.value.timeout_ms == 1000
        assert exc_info.value.elapsed_ms == pytest.approx(1001)

    def test_not_yet_elapsed(self, search, clock):
        search.step(1000, 0)
        clock.advance_ms(999)
        assert search.step(1000, 0) == SearchingForEnemy()

    def test_disabled(self, search, clock):
        search.step(0, 0)
        clock.advance_ms(10_000_000)
        search.step(0, 0)

    def test_clear_restarts_timer(self, search, clock):
        search.step(1000, 0)
        clock.advance_ms(900)
        search.clear_inactivity()
        search.step(1000, 0)
        clock.advance_ms(900)
        search.step(1000, 0)
        assert search.no_enemy_since is not None
