"""刷怪进度汇报与事件历史。

:class:`ProgressInfo` 是状态机对外汇报的进度快照（是否在攻击、最近目标尺寸、
击杀数与效率），由宿主读取后转发给界面。
:class:`FarmingHistory` 记录最近的行为事件，用于日志与复盘。

使用方式::

    history = FarmingHistory()
    history.add(FarmingEvent(event_type=EventType.KILL, bounds=mob.bounds))
    print(history)
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from autofarm.data import Bounds


# ═══════════════════════════════════════════════════════════════════════════════
# 击杀统计
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class KillStats:
    """单次击杀的耗时拆分与效率估算。

    Attributes
    ----------
    search_time_ms:
        从上次击杀到本次开始攻击的搜索耗时。
    time_to_kill_ms:
        从开始攻击到击杀的耗时。
    kills_per_minute, kills_per_hour:
        按本次耗时推算的效率。
    """

    search_time_ms: float
    time_to_kill_ms: float
    kills_per_minute: float
    kills_per_hour: float

    @classmethod
    def compute(
        cls,
        now: float,
        last_kill_time: float,
        attack_start_time: float,
    ) -> KillStats:
        """由时间戳（秒）计算统计。

        Parameters
        ----------
        now:
            击杀时刻。
        last_kill_time:
            上次击杀时刻；首杀时为会话开始时刻。
        attack_start_time:
            本次开始攻击的时刻。
        """
        time_to_kill = max(now - attack_start_time, 0.0)
        search_time = max((now - last_kill_time) - time_to_kill, 0.0)

        total = time_to_kill + search_time
        kills_per_minute = float(round(60.0 / total)) if total > 0 else 0.0
        kills_per_hour = kills_per_minute * 60.0

        return cls(
            search_time_ms=search_time * 1000,
            time_to_kill_ms=time_to_kill * 1000,
            kills_per_minute=kills_per_minute,
            kills_per_hour=kills_per_hour,
        )

    def __str__(self) -> str:
        return (
            f"击杀耗时 {self.time_to_kill_ms / 1000:.2f}s "
            f"搜索耗时 {self.search_time_ms / 1000:.2f}s "
            f"({self.kills_per_minute:.0f}/分钟, {self.kills_per_hour:.0f}/小时)"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# 进度快照
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class ProgressInfo:
    """对外汇报的刷怪进度。"""

    is_attacking: bool = False
    last_mob_bounds: tuple[int, int] | None = None
    """最近一次选中目标的名称框尺寸 ``(w, h)``，用于配置白名单"""
    kill_count: int = 0
    kills_per_minute: float = 0.0
    kills_per_hour: float = 0.0
    last_search_time_ms: float = 0.0
    last_time_to_kill_ms: float = 0.0

    def set_kill_stats(self, stats: KillStats) -> None:
        self.kills_per_minute = stats.kills_per_minute
        self.kills_per_hour = stats.kills_per_hour
        self.last_search_time_ms = stats.search_time_ms
        self.last_time_to_kill_ms = stats.time_to_kill_ms

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_attacking": self.is_attacking,
            "last_mob_bounds": self.last_mob_bounds,
            "kill_count": self.kill_count,
            "kills_per_minute": self.kills_per_minute,
            "kills_per_hour": self.kills_per_hour,
            "last_search_time_ms": self.last_search_time_ms,
            "last_time_to_kill_ms": self.last_time_to_kill_ms,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# 事件历史
# ═══════════════════════════════════════════════════════════════════════════════


class EventType(Enum):
    """刷怪事件类型。"""

    ENEMY_FOUND = auto()
    """选中目标并点击。"""

    AVOID = auto()
    """跳过目标（白名单 / NPC / 非怪物）。"""

    ATTACK_START = auto()
    """攻击开始生效。"""

    OBSTACLE = auto()
    """触发避障动作。"""

    ABORT = auto()
    """放弃攻击。"""

    STEAL_SUSPECTED = auto()
    """疑似被抢怪。"""

    KILL = auto()
    """击杀。"""

    NO_ENEMY = auto()
    """空闲搜索（绕圈 / 原地等待）。"""

    PICKUP = auto()
    """拾取物品。"""


@dataclass
class FarmingEvent:
    """单个行为事件记录。

    Attributes
    ----------
    event_type:
        事件类型。
    bounds:
        相关目标区域。
    action:
        执行的动作描述。
    extra:
        其他附加信息。
    """

    event_type: EventType
    bounds: Bounds | None = None
    action: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.event_type.name}]"]
        if self.bounds is not None:
            parts.append(f"区域={self.bounds.to_tuple()}")
        if self.action:
            parts.append(f"动作={self.action}")
        if self.extra:
            parts.append(f"附加={self.extra}")
        return " | ".join(parts)


class FarmingHistory:
    """最近的行为事件，超出容量时丢弃最早的记录。"""

    def __init__(self, maxlen: int = 500) -> None:
        self.events: deque[FarmingEvent] = deque(maxlen=maxlen)

    def add(self, event: FarmingEvent) -> None:
        self.events.append(event)

    def reset(self) -> None:
        self.events.clear()

    def count(self, event_type: EventType) -> int:
        """指定类型事件的数量。"""
        return sum(1 for e in self.events if e.event_type == event_type)

    @property
    def last(self) -> FarmingEvent | None:
        return self.events[-1] if self.events else None

    def __str__(self) -> str:
        return "\n".join(str(e) for e in self.events)

    def __repr__(self) -> str:
        return f"FarmingHistory({len(self.events)} events)"

    def __len__(self) -> int:
        return len(self.events)
