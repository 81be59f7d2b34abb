"""避障与放弃攻击。

``ObstacleAvoidanceMixin`` 为 :class:`~autofarm.behavior.engine.FarmingBehavior`
提供攻击中的卡怪处理：目标准星消失或目标血量长时间不变时，
依次尝试跳跃、随机侧移跳跃，尝试次数达到上限后放弃当前目标。

放弃攻击分两种:
  - 疑似被抢怪（此前已对同一目标发起过攻击）：把准星区域按尝试次数放大后加入规避
  - 普通卡怪：把上次点击点周围 2×2 像素加入规避 5 秒，重置避障计数
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from loguru import logger

from autofarm.behavior.progress import EventType, FarmingEvent
from autofarm.behavior.state import EngagementState, SearchingForEnemy
from autofarm.control.movement import (
    Fixed,
    HoldKeyFor,
    HoldKeys,
    PressKey,
    ReleaseKeys,
    Wait,
)
from autofarm.data import Bounds
from autofarm.infra.logger import save_image

if TYPE_CHECKING:
    from autofarm.behavior.avoidance import AvoidanceMemory
    from autofarm.behavior.progress import FarmingHistory
    from autofarm.control.movement import MovementAccessor
    from autofarm.data import Point
    from autofarm.infra.config import BotConfig
    from autofarm.telemetry import Telemetry

LAST_CLICK_AVOID_MARGIN = 1
"""上次点击点的规避半径，得到 2×2 像素区域。"""
LAST_CLICK_AVOID_TTL_MS = 5000
STOLEN_TARGET_AVOID_TTL_MS = 2000
STOLEN_TARGET_GROW_PER_ATTEMPT = 10
"""每次被抢后规避区域向外扩展的像素数。"""

JUMP_DURATION_MS = 800
STRAFE_DURATION_MS = 200


class ObstacleAvoidanceMixin:
    """避障 Mixin。

    约定: 本 Mixin 假设宿主类具有以下属性::

        _movement: MovementAccessor
        _clock: Callable[[], float]
        _avoidance: AvoidanceMemory
        _history: FarmingHistory
        _is_attacking: bool
        _obstacle_avoidance_count: int
        _already_attack_count: int
        _last_click_pos: Point | None
    """

    _movement: MovementAccessor
    _clock: Callable[[], float]
    _avoidance: AvoidanceMemory
    _history: FarmingHistory
    _is_attacking: bool
    _obstacle_avoidance_count: int
    _already_attack_count: int
    _last_click_pos: Point | None

    def _avoid_last_click(self) -> None:
        """规避上次点击的位置，避免短时间内再点到同一个东西。"""
        if self._last_click_pos is None:
            return
        self._avoidance.push(
            Bounds.around(self._last_click_pos, LAST_CLICK_AVOID_MARGIN),
            self._clock(),
            LAST_CLICK_AVOID_TTL_MS,
        )

    def _abort_attack(self, config: BotConfig, telemetry: Telemetry) -> EngagementState:
        """放弃当前目标，按 Escape 取消选中并回到搜索。

        开启 ``log.save_images`` 时把本帧截图存到日志目录的 ``images/`` 下。
        """
        self._is_attacking = False
        marker = telemetry.client_stats.target_marker

        if self._already_attack_count > 0:
            if marker is not None:
                grown = marker.bounds.grow_by(
                    self._already_attack_count * STOLEN_TARGET_GROW_PER_ATTEMPT
                )
                self._avoidance.push(grown, self._clock(), STOLEN_TARGET_AVOID_TTL_MS)
                self._already_attack_count += 1
            logger.info("疑似被抢怪，放弃目标 (第 {} 次)", self._already_attack_count)
            self._history.add(FarmingEvent(
                event_type=EventType.ABORT,
                bounds=marker.bounds if marker is not None else None,
                action="被抢",
            ))
        else:
            self._obstacle_avoidance_count = 0
            self._avoid_last_click()
            logger.info("放弃攻击，规避点击位置 {}", self._last_click_pos)
            self._history.add(FarmingEvent(
                event_type=EventType.ABORT,
                action="卡怪",
                extra={"click": self._last_click_pos},
            ))

        if config.log.save_images and telemetry.frame is not None:
            save_image(telemetry.frame, tag="abort_attack", img_dir=config.log.dir / "images")

        self._movement.play([PressKey("Escape")])
        return SearchingForEnemy()

    def _avoid_obstacle(
        self, config: BotConfig, telemetry: Telemetry, max_avoid: int
    ) -> bool:
        """执行一次避障；达到上限时放弃攻击。

        第 1 次：跳跃前进。之后：跳跃前进的同时随机向左或向右侧移。
        每次避障后把目标血量的变化时间重置为当前时刻，从避障结束重新计时。

        Parameters
        ----------
        config:
            当前配置。
        telemetry:
            本帧遥测。
        max_avoid:
            避障次数上限；本次检查使计数达到上限时直接放弃。

        Returns
        -------
        bool
            ``True`` 表示已放弃攻击。
        """
        if self._obstacle_avoidance_count + 1 >= max_avoid:
            logger.debug("避障 {} 次无效，放弃攻击", self._obstacle_avoidance_count)
            self._abort_attack(config, telemetry)
            return True

        if self._obstacle_avoidance_count == 0:
            actions = [
                PressKey("Z"),
                HoldKeys(("W", "Space")),
                Wait(Fixed(JUMP_DURATION_MS)),
                ReleaseKeys(("Space", "W")),
            ]
        else:
            strafe_key = self._movement.rng.choice(["A", "D"])
            actions = [
                HoldKeys(("W", "Space")),
                HoldKeyFor(strafe_key, Fixed(STRAFE_DURATION_MS)),
                Wait(Fixed(JUMP_DURATION_MS)),
                ReleaseKeys(("Space", "W")),
                PressKey("Z"),
            ]
        self._movement.play(actions)

        telemetry.client_stats.target_hp.reset_last_update_time(self._clock())
        self._obstacle_avoidance_count += 1
        self._history.add(FarmingEvent(
            event_type=EventType.OBSTACLE,
            action=f"避障 #{self._obstacle_avoidance_count}",
        ))
        return False
