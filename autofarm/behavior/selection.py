"""目标选择 — 从本帧候选怪物中挑出最合适的攻击目标。

选择分两步:
  1. :func:`prioritize` 按怪物类型筛选候选列表（主动怪优先，附带防反复规则）
  2. :func:`find_closest` 在候选中排除规避区域、屏幕底部 UI 区域和过远目标，
     返回距离参考点（屏幕中心）最近的一个

两步都可能返回空结果，调用方应把 ``None`` 当作 "视野内没有怪物" 处理。
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from autofarm.behavior.avoidance import AvoidanceMemory
from autofarm.data import Point, Target
from autofarm.types import MobType

RECENT_KILL_WINDOW_MS = 5000
"""刚击杀主动怪后的防反复窗口。"""


def prioritize(
    mobs: Sequence[Target],
    last_killed_type: MobType,
    since_last_kill_ms: float,
) -> list[Target]:
    """按类型筛选候选。

    默认只保留主动怪；以下情况改用被动怪:

    - 视野内没有主动怪；
    - 恰好只有 1 只主动怪，上次击杀的也是主动怪且距今不足 5 秒
      （多半是刚杀的那只仍在渲染，或被多人争抢的刷新点）。

    Parameters
    ----------
    mobs:
        本帧识别出的全部候选。
    last_killed_type:
        上次击杀的怪物类型。
    since_last_kill_ms:
        距上次击杀的毫秒数。

    Returns
    -------
    list[Target]
        筛选后的候选，可能为空。
    """
    aggressive = [m for m in mobs if m.is_aggressive]

    recently_killed_lone_aggressive = (
        last_killed_type is MobType.aggressive
        and len(aggressive) == 1
        and since_last_kill_ms < RECENT_KILL_WINDOW_MS
    )
    if not aggressive or recently_killed_lone_aggressive:
        return [m for m in mobs if m.is_passive]
    return aggressive


def find_closest(
    mobs: Sequence[Target],
    origin: Point,
    *,
    max_distance: float,
    screen_height: int,
    ignore_area_bottom: int,
    avoidance: AvoidanceMemory | None = None,
    now: float = 0.0,
) -> Target | None:
    """返回距 *origin* 最近的可用目标。

    排除规则:

    - 名称框与任一有效规避记录重叠；
    - 攻击点落在屏幕底部 *ignore_area_bottom* 像素内（UI 区域）；
    - 攻击点距 *origin* 超过 *max_distance*。

    距离相同时保留列表中靠前的目标。
    """
    bottom_limit = screen_height - ignore_area_bottom
    best: Target | None = None
    best_distance = float("inf")

    for mob in mobs:
        point = mob.attack_coords
        if point.y >= bottom_limit:
            continue
        if avoidance is not None and avoidance.overlaps(mob.bounds, now):
            logger.trace("跳过规避区域内的目标 {}", mob.bounds)
            continue
        distance = point.distance_to(origin)
        if distance > max_distance:
            continue
        if distance < best_distance:
            best = mob
            best_distance = distance

    return best
