"""刷怪状态机的状态定义。

状态为带负载的标签联合：``EnemyFound`` / ``Attacking`` / ``AfterEnemyKill``
直接携带触发它的目标，不另设 "当前目标" 字段，目标只在所属状态存活期间有意义。
每次转移都整体替换状态对象，从不就地修改。

一次典型的刷怪流程::

    SearchingForEnemy → EnemyFound(mob) → Attacking(mob)
        → AfterEnemyKill(mob) → SearchingForEnemy → ...

找不到怪物时::

    SearchingForEnemy → NoEnemyFound → SearchingForEnemy → ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from autofarm.data import Target


@dataclass(frozen=True, slots=True)
class NoEnemyFound:
    """视野内没有可攻击的怪物，执行空闲搜索。"""

    def __str__(self) -> str:
        return "NoEnemyFound"


@dataclass(frozen=True, slots=True)
class SearchingForEnemy:
    """读取本帧候选怪物并挑选目标。"""

    def __str__(self) -> str:
        return "SearchingForEnemy"


@dataclass(frozen=True, slots=True)
class EnemyFound:
    """已选中目标，准备点击。"""

    target: Target

    def __str__(self) -> str:
        return f"EnemyFound({self.target.bounds})"


@dataclass(frozen=True, slots=True)
class Attacking:
    """正在攻击目标（或等待攻击生效）。"""

    target: Target

    def __str__(self) -> str:
        return f"Attacking({self.target.bounds})"


@dataclass(frozen=True, slots=True)
class AfterEnemyKill:
    """目标刚被击杀，统计并拾取。"""

    target: Target

    def __str__(self) -> str:
        return f"AfterEnemyKill({self.target.bounds})"


EngagementState = Union[
    NoEnemyFound,
    SearchingForEnemy,
    EnemyFound,
    Attacking,
    AfterEnemyKill,
]
"""刷怪状态机的全部状态。"""
