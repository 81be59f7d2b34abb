"""刷怪引擎 — 状态机主循环。

``FarmingBehavior`` 是行为层的核心，宿主每帧调用一次 :meth:`run_iteration`::

    更新计时 → 按当前状态分派处理器 → 用处理器返回值整体替换状态

处理器内部发出的按键 / 点击都在本次调用内同步完成，不会跨帧延迟。

模块拆分::

    handlers.py   — 各状态处理器 (StateHandlersMixin)
    obstacle.py   — 避障与放弃攻击 (ObstacleAvoidanceMixin)
    engine.py     — 主循环与运行时状态 (本文件)

使用方式::

    behavior = FarmingBehavior(controller)
    behavior.start(config)
    while True:
        behavior.run_iteration(vision.capture(), config)
"""

from __future__ import annotations

import random
import time
from typing import Callable

from loguru import logger

from autofarm.behavior.avoidance import AvoidanceMemory
from autofarm.behavior.handlers import StateHandlersMixin
from autofarm.behavior.obstacle import ObstacleAvoidanceMixin
from autofarm.behavior.progress import FarmingHistory, ProgressInfo
from autofarm.behavior.search import IdleSearch
from autofarm.behavior.slots import SlotsUsage
from autofarm.behavior.state import (
    AfterEnemyKill,
    Attacking,
    EnemyFound,
    EngagementState,
    NoEnemyFound,
    SearchingForEnemy,
)
from autofarm.control.controller import InputController
from autofarm.control.movement import MovementAccessor
from autofarm.data import Point
from autofarm.infra.config import BotConfig
from autofarm.infra.exceptions import BehaviorError
from autofarm.telemetry import Telemetry
from autofarm.types import MobType, SlotType


class FarmingBehavior(ObstacleAvoidanceMixin, StateHandlersMixin):
    """刷怪状态机。

    一个实例对应一次机器人运行，持有全部运行时计数与时间戳。

    Parameters
    ----------
    controller:
        输入注入控制器。与 *movement* 二选一。
    movement:
        已构建的移动执行器（与其他组件共享锁时传入）。
    clock:
        单调时钟（秒）。
    sleep:
        阻塞等待函数（秒），仅在自行构建执行器时使用。
    rng:
        随机数源，仅在自行构建执行器时使用。
    """

    def __init__(
        self,
        controller: InputController | None = None,
        *,
        movement: MovementAccessor | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ) -> None:
        if movement is None:
            if controller is None:
                raise ValueError("controller 与 movement 至少提供一个")
            movement = MovementAccessor(controller, sleep=sleep, rng=rng)

        self._movement = movement
        self._clock = clock

        self._state: EngagementState = SearchingForEnemy()
        self._avoidance = AvoidanceMemory()
        self._search = IdleSearch(movement, clock)
        self._slots = SlotsUsage(movement, clock)
        self._progress = ProgressInfo()
        self._history = FarmingHistory()

        now = clock()
        self._start_time = now
        self._last_kill_time = now
        self._last_initial_attack_time = now
        self._last_summon_pet_time: float | None = None
        self._last_killed_type = MobType.passive
        self._last_click_pos: Point | None = None
        self._is_attacking = False
        self._kill_count = 0
        self._obstacle_avoidance_count = 0
        self._already_attack_count = 0
        self._stolen_target_count = 0
        self._steal_suspected = False

    # ═══════════════════════════════════════════════════════════════════════════
    # 生命周期
    # ═══════════════════════════════════════════════════════════════════════════

    def start(self, config: BotConfig) -> None:
        """开始运行前调用。"""
        self._slots.update_config(config.farming)
        logger.info(
            "刷怪开始 (手动选怪={}, 绕圈={}ms, 白名单={})",
            config.farming.manual_targeting,
            config.farming.circle_pattern_rotation_duration,
            config.whitelist_enabled,
        )

    def update(self, config: BotConfig) -> None:
        """配置热更新。"""
        self._slots.update_config(config.farming)

    def stop(self, config: BotConfig) -> None:
        logger.info("刷怪结束，共击杀 {}", self._kill_count)

    # ═══════════════════════════════════════════════════════════════════════════
    # 主循环
    # ═══════════════════════════════════════════════════════════════════════════

    def run_iteration(self, telemetry: Telemetry, config: BotConfig) -> EngagementState:
        """执行一帧决策，返回新状态。

        Raises
        ------
        InactivityTimeoutError
            空闲超时，宿主应终止运行。
        """
        self._slots.update_config(config.farming)
        self._update_timestamps(config)

        self._slots.check_restorations(telemetry.client_stats)
        self._slots.get_slot_for(SlotType.chat_message, True)

        last_state = self._state
        match last_state:
            case NoEnemyFound():
                new_state = self._on_no_enemy_found(config)
            case SearchingForEnemy():
                new_state = self._on_searching_for_enemy(config, telemetry)
            case EnemyFound(target=mob):
                new_state = self._on_enemy_found(config, telemetry, mob)
            case Attacking(target=mob):
                new_state = self._on_attacking(config, telemetry, mob)
            case AfterEnemyKill():
                new_state = self._after_enemy_kill()
            case _:
                raise BehaviorError(f"未知状态: {last_state!r}")

        if new_state != last_state:
            logger.debug("{} → {}", last_state, new_state)
        self._state = new_state
        self._progress.is_attacking = self._is_attacking
        return new_state

    def _update_timestamps(self, config: BotConfig) -> None:
        """每帧开头的计时维护：宠物收回、技能冷却、规避记录过期。"""
        self._update_pickup_pet(config.farming)
        self._slots.update_slots_usage()
        self._avoidance.prune(self._clock())

    # ═══════════════════════════════════════════════════════════════════════════
    # 只读属性
    # ═══════════════════════════════════════════════════════════════════════════

    @property
    def state(self) -> EngagementState:
        """当前状态。"""
        return self._state

    @property
    def progress(self) -> ProgressInfo:
        """对外汇报的进度。"""
        return self._progress

    @property
    def history(self) -> FarmingHistory:
        """事件历史。"""
        return self._history

    @property
    def avoidance(self) -> AvoidanceMemory:
        """规避记忆。"""
        return self._avoidance

    @property
    def search(self) -> IdleSearch:
        """空闲搜索控制器。"""
        return self._search

    @property
    def kill_count(self) -> int:
        return self._kill_count

    @property
    def is_attacking(self) -> bool:
        return self._is_attacking

    @property
    def obstacle_avoidance_count(self) -> int:
        return self._obstacle_avoidance_count

    @property
    def last_click_pos(self) -> Point | None:
        return self._last_click_pos
