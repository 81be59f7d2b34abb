"""刷怪状态处理器 — 各状态的决策逻辑。

``StateHandlersMixin`` 为 :class:`~autofarm.behavior.engine.FarmingBehavior`
提供各状态的处理器方法（``_on_*``），将决策逻辑从主循环中分离。

每个处理器对应一个状态，执行该状态所需的操作，并返回下一个状态。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from loguru import logger

from autofarm.behavior.progress import EventType, FarmingEvent, KillStats
from autofarm.behavior.selection import find_closest, prioritize
from autofarm.behavior.state import (
    AfterEnemyKill,
    Attacking,
    EnemyFound,
    EngagementState,
    NoEnemyFound,
    SearchingForEnemy,
)
from autofarm.control.movement import AvoidClick, Click, Fixed, Wait
from autofarm.infra.config import DEFAULT_PICKUP_PET_COOLDOWN_MS
from autofarm.types import MobType, SlotType

if TYPE_CHECKING:
    from autofarm.behavior.avoidance import AvoidanceMemory
    from autofarm.behavior.progress import FarmingHistory, ProgressInfo
    from autofarm.behavior.search import IdleSearch
    from autofarm.behavior.slots import SlotsUsage
    from autofarm.control.movement import MovementAccessor
    from autofarm.data import Point, Target
    from autofarm.infra.config import BotConfig, FarmingConfig
    from autofarm.telemetry import ClientStats, Telemetry

CLICK_SETTLE_MS = 500
"""点击怪物后等待客户端响应的时长。"""
AVOID_CLICK_OFFSET = 100
"""躲避主动怪时点击点相对攻击点的偏移。"""
STOLEN_TARGET_THRESHOLD = 5
"""连续遇到残血目标超过该次数即认为有人在抢怪。"""
PICKUP_MOTION_PRESSES = 6


class StateHandlersMixin:
    """刷怪状态处理器 Mixin。

    约定: 本 Mixin 假设宿主类具有以下属性::

        _movement: MovementAccessor
        _clock: Callable[[], float]
        _avoidance: AvoidanceMemory
        _search: IdleSearch
        _slots: SlotsUsage
        _history: FarmingHistory
        _progress: ProgressInfo
        ...以及下方声明的运行时计数 / 时间戳
    """

    _movement: MovementAccessor
    _clock: Callable[[], float]
    _avoidance: AvoidanceMemory
    _search: IdleSearch
    _slots: SlotsUsage
    _history: FarmingHistory
    _progress: ProgressInfo

    _start_time: float
    _last_kill_time: float
    _last_initial_attack_time: float
    _last_summon_pet_time: float | None
    _last_killed_type: MobType
    _last_click_pos: Point | None
    _is_attacking: bool
    _kill_count: int
    _obstacle_avoidance_count: int
    _already_attack_count: int
    _stolen_target_count: int
    _steal_suspected: bool

    # ── NoEnemyFound ─────────────────────────────────────────────────────────

    def _on_no_enemy_found(self, config: BotConfig) -> EngagementState:
        """空闲搜索（旋转 / 绕圈 / 待命），超时抛出不可恢复异常。"""
        next_state = self._search.step(
            config.inactivity_timeout,
            config.farming.circle_pattern_rotation_duration,
        )
        if isinstance(next_state, NoEnemyFound):
            self._history.add(FarmingEvent(event_type=EventType.NO_ENEMY, action="待命"))
        return next_state

    # ── SearchingForEnemy ────────────────────────────────────────────────────

    def _on_searching_for_enemy(
        self,
        config: BotConfig,
        telemetry: Telemetry,
    ) -> EngagementState:
        """从本帧候选中挑选目标。"""
        farming = config.farming
        no_enemy: EngagementState = (
            SearchingForEnemy() if farming.manual_targeting else NoEnemyFound()
        )
        if not telemetry.mobs:
            return no_enemy

        now = self._clock()
        candidates = prioritize(
            telemetry.mobs,
            self._last_killed_type,
            (now - self._last_kill_time) * 1000,
        )
        if not candidates:
            return no_enemy

        self._search.reset_rotation()
        mob = find_closest(
            candidates,
            telemetry.screen_center,
            max_distance=farming.max_distance,
            screen_height=telemetry.screen_height,
            ignore_area_bottom=farming.ignore_area_bottom,
            avoidance=self._avoidance if self._avoidance else None,
            now=now,
        )
        if mob is None:
            return SearchingForEnemy()

        logger.debug("选中目标 {} ({})", mob.bounds, mob.target_type.value)
        return EnemyFound(mob)

    # ── EnemyFound ───────────────────────────────────────────────────────────

    def _on_enemy_found(
        self,
        config: BotConfig,
        telemetry: Telemetry,
        mob: Target,
    ) -> EngagementState:
        """检查白名单后点击目标。"""
        farming = config.farming
        self._progress.last_mob_bounds = (mob.bounds.w, mob.bounds.h)

        if farming.manual_targeting:
            if telemetry.client_stats.target_hp.value > 0:
                return Attacking(mob)
            return SearchingForEnemy()

        if config.whitelist_enabled and not config.match_whitelist(mob):
            if mob.is_aggressive:
                # 主动怪会追过来，先走开
                self._movement.play([AvoidClick(mob.active_avoid_coords(AVOID_CLICK_OFFSET))])
            self._history.add(FarmingEvent(
                event_type=EventType.AVOID,
                bounds=mob.bounds,
                action="不在白名单",
            ))
            return SearchingForEnemy()

        self._search.clear_inactivity()
        point = mob.attack_coords
        self._last_click_pos = point

        self._movement.play([
            Click(point),
            Wait(Fixed(CLICK_SETTLE_MS)),
        ])
        self._history.add(FarmingEvent(
            event_type=EventType.ENEMY_FOUND,
            bounds=mob.bounds,
            action=f"点击 ({point.x}, {point.y})",
        ))
        return Attacking(mob)

    # ── Attacking ────────────────────────────────────────────────────────────

    def _on_attacking(
        self,
        config: BotConfig,
        telemetry: Telemetry,
        mob: Target,
    ) -> EngagementState:
        """确认目标性质，监视战斗进展，处理卡怪与击杀。"""
        farming = config.farming
        thresholds = config.classification
        stats = telemetry.client_stats
        now = self._clock()

        target_hp = stats.target_hp.value
        target_mp = stats.target_mp.value
        is_npc = target_hp == thresholds.npc_hp and target_mp == thresholds.npc_mp
        is_mob = target_hp > 0 and target_mp > 0
        is_mob_alive = stats.target_marker is not None or target_mp > 0 or target_hp > 0

        if not self._is_attacking and not farming.manual_targeting:
            if is_npc or not is_mob:
                # NPC 或根本没选中东西
                self._avoid_last_click()
                self._history.add(FarmingEvent(
                    event_type=EventType.AVOID,
                    bounds=mob.bounds,
                    action="NPC" if is_npc else "非怪物",
                ))
                return SearchingForEnemy()

            self._search.reset_rotation()
            if target_hp < thresholds.full_hp and farming.prevent_already_attacked:
                if _hp_stalled_ms(stats, now) > farming.already_attacked_timeout_ms:
                    logger.info("目标已被他人攻击 (HP={})，放弃", target_hp)
                    return self._abort_attack(config, telemetry)
                self._note_damaged_target(mob)

        elif not self._is_attacking and farming.manual_targeting:
            if not is_mob:
                return SearchingForEnemy()

        if is_mob_alive:
            if not self._is_attacking:
                self._begin_engagement(now, mob)

            if not farming.manual_targeting:
                since_hp_update = stats.target_hp.elapsed_ms(now) or 0.0
                if (
                    stats.target_marker is None
                    or since_hp_update > config.obstacle_avoidance_cooldown
                ):
                    if self._steal_suspected:
                        # 直接跳过第一次避障
                        self._steal_suspected = False
                        self._obstacle_avoidance_count = max(self._obstacle_avoidance_count, 1)
                    max_avoid = (
                        2 if target_hp == thresholds.full_hp
                        else farming.obstacle_avoidance_max_try
                    )
                    if self._avoid_obstacle(config, telemetry, max_avoid):
                        return SearchingForEnemy()
                else:
                    self._obstacle_avoidance_count = 0

            # 只在有目标时使用增益，避免浪费
            self._slots.check_buffs()
            self._slots.get_slot_for(SlotType.attack_skill, True)
            return Attacking(mob)

        if self._is_attacking:
            if mob.mob_type is not None:
                self._last_killed_type = mob.mob_type
            self._is_attacking = False
            return AfterEnemyKill(mob)

        self._is_attacking = False
        return SearchingForEnemy()

    def _begin_engagement(self, now: float, mob: Target) -> None:
        """攻击开始生效，重置本次交战的计数。"""
        self._is_attacking = True
        self._last_initial_attack_time = now
        self._obstacle_avoidance_count = 0
        # 疑似被抢时，放弃攻击走被抢分支
        self._already_attack_count = 1 if self._steal_suspected else 0
        self._history.add(FarmingEvent(event_type=EventType.ATTACK_START, bounds=mob.bounds))

    def _note_damaged_target(self, mob: Target) -> None:
        """累计遇到的残血目标，超过阈值后标记疑似被抢。"""
        self._stolen_target_count += 1
        if self._stolen_target_count > STOLEN_TARGET_THRESHOLD:
            logger.warning("连续 {} 个目标为残血，疑似有人抢怪", self._stolen_target_count)
            self._stolen_target_count = 0
            self._steal_suspected = True
            self._history.add(FarmingEvent(
                event_type=EventType.STEAL_SUSPECTED,
                bounds=mob.bounds,
            ))

    # ── AfterEnemyKill ───────────────────────────────────────────────────────

    def _after_enemy_kill(self) -> EngagementState:
        """记录击杀并拾取掉落。"""
        now = self._clock()
        self._kill_count += 1
        self._progress.kill_count = self._kill_count

        stats = KillStats.compute(now, self._last_kill_time, self._last_initial_attack_time)
        self._progress.set_kill_stats(stats)
        logger.info(
            "击杀 #{} 运行 {:.0f}s {}",
            self._kill_count,
            now - self._start_time,
            stats,
        )
        self._history.add(FarmingEvent(
            event_type=EventType.KILL,
            extra={"kill_count": self._kill_count},
        ))

        self._stolen_target_count = 0
        self._last_kill_time = now

        self._pickup_items()
        return SearchingForEnemy()

    # ── 拾取 ─────────────────────────────────────────────────────────────────

    def _pickup_items(self) -> None:
        """召唤拾取宠物；没有宠物时连按拾取动作。"""
        pet = self._slots.get_slot_for(SlotType.pickup_pet, False)
        if pet is not None:
            if self._last_summon_pet_time is None:
                self._slots.trigger(pet)
            # 宠物已在场时只刷新计时
            self._last_summon_pet_time = self._clock()
            self._history.add(FarmingEvent(event_type=EventType.PICKUP, action="宠物"))
            return

        motion = self._slots.get_slot_for(SlotType.pickup_motion, False)
        if motion is None:
            logger.debug("未配置拾取槽位，跳过拾取")
            return
        for _ in range(PICKUP_MOTION_PRESSES):
            self._slots.trigger(motion)
        self._history.add(FarmingEvent(event_type=EventType.PICKUP, action="动作"))

    def _update_pickup_pet(self, farming: FarmingConfig) -> None:
        """宠物在场超过冷却时长后收回。"""
        index = farming.slot_index(SlotType.pickup_pet)
        if index is None or self._last_summon_pet_time is None:
            return
        cooldown = farming.get_slot_cooldown(*index)
        if cooldown is None:
            cooldown = DEFAULT_PICKUP_PET_COOLDOWN_MS
        if (self._clock() - self._last_summon_pet_time) * 1000 > cooldown:
            self._slots.trigger(index)
            self._last_summon_pet_time = None

    # ── Mixin 所需的方法签名 (由 ObstacleAvoidanceMixin 提供) ──

    def _avoid_last_click(self) -> None:
        raise NotImplementedError

    def _abort_attack(self, config: BotConfig, telemetry: Telemetry) -> EngagementState:
        raise NotImplementedError

    def _avoid_obstacle(
        self, config: BotConfig, telemetry: Telemetry, max_avoid: int
    ) -> bool:
        raise NotImplementedError


def _hp_stalled_ms(stats: ClientStats, now: float) -> float:
    """角色血量没有变化的时长（没挨打说明目标在和别人打）。

    从未读到角色血量时退回目标血量；两者都没有读数时为 0。
    """
    elapsed = stats.hp.elapsed_ms(now)
    if elapsed is None:
        elapsed = stats.target_hp.elapsed_ms(now)
    return elapsed or 0.0
