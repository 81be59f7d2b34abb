"""视觉遥测数据契约。

视觉识别层每帧产出一个 :class:`Telemetry` 快照，供行为状态机读取。
:class:`ClientStats` 在帧之间持续存在（由识别层持有并逐帧更新），
因此 "最后一次变化时间" 这类时钟信息可以跨帧累积。

缺失的读数一律视为零值 / ``None``，状态机不会因字段缺失而报错。
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from autofarm.data import Point, Target


@dataclass
class StatInfo:
    """单个数值条（血 / 蓝 / FP）的读数。

    Attributes
    ----------
    value:
        当前百分比读数 (0–100)。
    last_update_time:
        数值最后一次变化的时间戳（秒，单调时钟）。从未变化过时为 ``None``。
    """

    value: int = 0
    last_update_time: float | None = None

    def update(self, value: int | None, now: float) -> bool:
        """写入新读数，仅在数值变化时刷新时钟。返回是否发生变化。"""
        value = value or 0
        if value == self.value and self.last_update_time is not None:
            return False
        self.value = value
        self.last_update_time = now
        return True

    def reset_last_update_time(self, now: float) -> None:
        """把最后变化时间重置为 *now*（避障后重新计时用）。"""
        self.last_update_time = now

    def elapsed_ms(self, now: float) -> float | None:
        """距最后一次变化的毫秒数；从未有过读数时返回 ``None``。"""
        if self.last_update_time is None:
            return None
        return (now - self.last_update_time) * 1000


@dataclass
class ClientStats:
    """角色与当前目标的状态读数。"""

    hp: StatInfo = field(default_factory=StatInfo)
    mp: StatInfo = field(default_factory=StatInfo)
    fp: StatInfo = field(default_factory=StatInfo)
    target_hp: StatInfo = field(default_factory=StatInfo)
    target_mp: StatInfo = field(default_factory=StatInfo)
    target_marker: Target | None = None
    """当前锁定目标的准星；未锁定时为 ``None``。"""

    def update(
        self,
        now: float,
        *,
        hp: int | None = None,
        mp: int | None = None,
        fp: int | None = None,
        target_hp: int | None = None,
        target_mp: int | None = None,
        target_marker: Target | None = None,
    ) -> None:
        """写入一帧读数，未提供的字段按零值处理。"""
        self.hp.update(hp, now)
        self.mp.update(mp, now)
        self.fp.update(fp, now)
        self.target_hp.update(target_hp, now)
        self.target_mp.update(target_mp, now)
        self.target_marker = target_marker


@dataclass
class Telemetry:
    """单帧遥测快照。

    Attributes
    ----------
    mobs:
        本帧识别出的候选怪物。
    client_stats:
        持续更新的状态读数。
    screen_width, screen_height:
        客户端可视区域尺寸（像素）。
    frame:
        原始 RGB 截图，可选，仅用于调试存图。
    """

    mobs: list[Target] = field(default_factory=list)
    client_stats: ClientStats = field(default_factory=ClientStats)
    screen_width: int = 800
    screen_height: int = 600
    frame: np.ndarray | None = None

    @property
    def screen_center(self) -> Point:
        return Point(self.screen_width // 2, self.screen_height // 2)
