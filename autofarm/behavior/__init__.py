"""刷怪行为 — 独立于视觉与输入实现的刷怪状态机。

模块组成::

    behavior/
    ├── state.py        # 状态定义（带目标负载的标签联合）
    ├── selection.py    # 目标筛选与最近目标查找
    ├── avoidance.py    # 短期规避记忆
    ├── search.py       # 空闲搜索（旋转 / 绕圈 / 超时）
    ├── slots.py        # 技能栏冷却与触发
    ├── progress.py     # 进度汇报与事件历史
    ├── obstacle.py     # 避障与放弃攻击
    ├── handlers.py     # 各状态处理器
    └── engine.py       # 状态机主循环

典型使用::

    from autofarm.behavior import FarmingBehavior

    behavior = FarmingBehavior(controller)
    behavior.start(config)
    state = behavior.run_iteration(telemetry, config)
"""

from .state import (
    AfterEnemyKill,
    Attacking,
    EnemyFound,
    EngagementState,
    NoEnemyFound,
    SearchingForEnemy,
)
from .avoidance import AvoidanceMemory, AvoidedBounds
from .selection import find_closest, prioritize
from .search import IdleSearch
from .slots import SlotsUsage
from .progress import EventType, FarmingEvent, FarmingHistory, KillStats, ProgressInfo
from .engine import FarmingBehavior

__all__ = [
    "AfterEnemyKill",
    "Attacking",
    "EnemyFound",
    "EngagementState",
    "NoEnemyFound",
    "SearchingForEnemy",
    "AvoidanceMemory",
    "AvoidedBounds",
    "find_closest",
    "prioritize",
    "IdleSearch",
    "SlotsUsage",
    "EventType",
    "FarmingEvent",
    "FarmingHistory",
    "KillStats",
    "ProgressInfo",
    "FarmingBehavior",
]
