"""空闲搜索 — 视野内没有怪物时的移动策略。

策略逐级升级:
  1. 原地小幅旋转并等待，最多 30 次（不离开当前区域即可发现附近的怪）
  2. 若配置了绕圈时长，执行一次 "前进 + 跳跃 + 侧移" 的绕圈移动
  3. 否则重置旋转计数，原地待命

首次进入空闲状态时开始计时；配置了超时且超时前一直没有找到怪物时，
抛出 :class:`~autofarm.infra.exceptions.InactivityTimeoutError`，
视为角色被困在无怪区域，不做任何恢复。
"""

from __future__ import annotations

from typing import Callable

from loguru import logger

from autofarm.behavior.state import EngagementState, NoEnemyFound, SearchingForEnemy
from autofarm.control.movement import (
    Fixed,
    HoldKeyFor,
    HoldKeys,
    MovementAccessor,
    ReleaseKey,
    ReleaseKeys,
    Rotate,
    Wait,
)
from autofarm.infra.exceptions import InactivityTimeoutError
from autofarm.types import RotationDirection

MAX_ROTATION_TRIES = 30
"""升级到绕圈 / 待命前的旋转次数。"""

ROTATION_DURATION_MS = 50
ROTATION_WAIT_MS = 50


class IdleSearch:
    """空闲搜索控制器。

    Parameters
    ----------
    movement:
        移动执行器。
    clock:
        单调时钟（秒）。
    """

    def __init__(self, movement: MovementAccessor, clock: Callable[[], float]) -> None:
        self._movement = movement
        self._clock = clock
        self.rotation_tries = 0
        self.no_enemy_since: float | None = None

    # ── 计数 / 计时 ──

    def reset_rotation(self) -> None:
        """发现怪物后重置旋转计数。"""
        self.rotation_tries = 0

    def clear_inactivity(self) -> None:
        """开始攻击后停止空闲计时。"""
        self.no_enemy_since = None

    def check_inactivity(self, timeout_ms: int) -> None:
        """首次调用开始计时；超时则抛出异常。

        Raises
        ------
        InactivityTimeoutError
            *timeout_ms* > 0 且空闲时长超过它。
        """
        now = self._clock()
        if self.no_enemy_since is None:
            self.no_enemy_since = now
            return
        elapsed_ms = (now - self.no_enemy_since) * 1000
        if timeout_ms > 0 and elapsed_ms > timeout_ms:
            logger.critical("已 {:.0f}ms 未发现任何怪物", elapsed_ms)
            raise InactivityTimeoutError(timeout_ms, elapsed_ms)

    # ── 搜索 ──

    def step(self, inactivity_timeout_ms: int, circle_duration_ms: int) -> EngagementState:
        """执行一次空闲搜索，返回下一个状态。"""
        self.check_inactivity(inactivity_timeout_ms)

        if self.rotation_tries < MAX_ROTATION_TRIES:
            self._movement.play([
                Rotate(RotationDirection.right, Fixed(ROTATION_DURATION_MS)),
                Wait(Fixed(ROTATION_WAIT_MS)),
            ])
            self.rotation_tries += 1
            return SearchingForEnemy()

        if circle_duration_ms > 0:
            logger.debug("旋转 {} 次未发现怪物，绕圈搜索", self.rotation_tries)
            self.move_circle_pattern(circle_duration_ms)
            return SearchingForEnemy()

        logger.debug("旋转 {} 次未发现怪物，原地待命", self.rotation_tries)
        self.rotation_tries = 0
        return NoEnemyFound()

    def move_circle_pattern(self, rotation_duration_ms: int) -> None:
        """绕圈移动一次。

        侧移键与前进键同时按住 *rotation_duration_ms*，随后松开侧移键继续前进片刻，
        最后后退一小步刹车。侧移时长越短，本次移动中侧移占比越低。
        """
        self._movement.play([
            HoldKeys(("W", "Space", "D")),
            Wait(Fixed(rotation_duration_ms)),
            ReleaseKey("D"),
            Wait(Fixed(20)),
            ReleaseKeys(("Space", "W")),
            HoldKeyFor("S", Fixed(50)),
        ])
