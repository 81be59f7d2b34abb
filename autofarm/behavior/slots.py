"""技能栏使用 — 冷却记账与按用途触发槽位。

只负责 "某个用途现在该按哪个槽位"，不参与战斗决策。
未配置的用途一律静默跳过，不会让当前帧失败。
"""

from __future__ import annotations

from typing import Callable

from autofarm.control.movement import MovementAccessor, SendSlot
from autofarm.infra.config import FarmingConfig
from autofarm.telemetry import ClientStats, StatInfo
from autofarm.types import SlotType

SlotIndex = tuple[int, int]
"""``(技能栏下标, 槽位下标)``"""


class SlotsUsage:
    """技能栏使用记录。

    Parameters
    ----------
    movement:
        移动执行器，所有按键经由它持锁发送。
    clock:
        单调时钟（秒）。
    """

    def __init__(self, movement: MovementAccessor, clock: Callable[[], float]) -> None:
        self._movement = movement
        self._clock = clock
        self._config = FarmingConfig()
        self._last_used: dict[SlotIndex, float] = {}

    def update_config(self, config: FarmingConfig) -> None:
        self._config = config

    # ── 冷却 ──

    def update_slots_usage(self) -> None:
        """清理冷却已结束的记录。"""
        self._last_used = {
            index: used_at
            for index, used_at in self._last_used.items()
            if not self._cooldown_over(index, used_at)
        }

    def _cooldown_over(self, index: SlotIndex, used_at: float) -> bool:
        cooldown = self._config.get_slot_cooldown(*index) or 0
        return (self._clock() - used_at) * 1000 >= cooldown

    def is_ready(self, index: SlotIndex) -> bool:
        used_at = self._last_used.get(index)
        return used_at is None or self._cooldown_over(index, used_at)

    # ── 触发 ──

    def trigger(self, index: SlotIndex) -> None:
        """按下槽位并记录使用时间。"""
        self._movement.play([SendSlot(*index)])
        self._last_used[index] = self._clock()

    def get_slot_for(
        self,
        slot_type: SlotType,
        send: bool,
        value: int | None = None,
    ) -> SlotIndex | None:
        """找到第一个可用的指定用途槽位。

        Parameters
        ----------
        slot_type:
            槽位用途。
        send:
            找到后是否立即触发。
        value:
            当前百分比读数；给出时只选择 ``threshold`` 高于它的槽位。

        Returns
        -------
        SlotIndex | None
            未配置或都在冷却中返回 ``None``。
        """
        for index in self._config.slots_of(slot_type):
            if not self.is_ready(index):
                continue
            if value is not None:
                slot = self._config.get_slot(*index)
                if slot is None or slot.threshold is None or value >= slot.threshold:
                    continue
            if send:
                self.trigger(index)
            return index
        return None

    def check_buffs(self) -> None:
        """触发所有已就绪的增益技能。"""
        for index in self._config.slots_of(SlotType.buff_skill):
            if self.is_ready(index):
                self.trigger(index)

    def check_restorations(self, stats: ClientStats) -> None:
        """血 / 蓝 / FP 低于槽位阈值时使用恢复道具。药丸优先于食物。"""
        if _has_reading(stats.hp):
            if self.get_slot_for(SlotType.pill, True, stats.hp.value) is None:
                self.get_slot_for(SlotType.food, True, stats.hp.value)
        if _has_reading(stats.mp):
            self.get_slot_for(SlotType.mp_restorer, True, stats.mp.value)
        if _has_reading(stats.fp):
            self.get_slot_for(SlotType.fp_restorer, True, stats.fp.value)


def _has_reading(stat: StatInfo) -> bool:
    """从未读到过的数值条不参与恢复判断。"""
    return stat.last_update_time is not None
