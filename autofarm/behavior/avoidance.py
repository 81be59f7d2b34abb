"""短期规避记忆。

记录一段时间内不应再次选中的屏幕区域，例如刚击杀的尸体仍显示血条、
点错的 NPC、疑似被抢的怪物。条目只增删不修改，每帧开头按过期时间清理。

使用方式::

    memory = AvoidanceMemory()
    memory.push(Bounds(100, 100, 40, 12), now=clock(), ttl_ms=5000)
    memory.prune(now=clock())
    memory.overlaps(candidate.bounds)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from loguru import logger

from autofarm.data import Bounds


@dataclass(frozen=True, slots=True)
class AvoidedBounds:
    """单条规避记录。

    Attributes
    ----------
    bounds:
        规避区域。
    created_at:
        创建时间戳（秒，单调时钟）。
    ttl_ms:
        有效时长（毫秒）。
    """

    bounds: Bounds
    created_at: float
    ttl_ms: int

    def is_active(self, now: float) -> bool:
        """``now - created_at < ttl`` 时仍然有效。"""
        return (now - self.created_at) * 1000 < self.ttl_ms


class AvoidanceMemory:
    """按创建顺序保存的规避记录集合。"""

    def __init__(self) -> None:
        self._entries: list[AvoidedBounds] = []

    def push(self, bounds: Bounds, now: float, ttl_ms: int) -> AvoidedBounds:
        """添加一条规避记录。"""
        entry = AvoidedBounds(bounds=bounds, created_at=now, ttl_ms=ttl_ms)
        self._entries.append(entry)
        logger.debug("规避区域 {} ({}ms)", bounds, ttl_ms)
        return entry

    def prune(self, now: float) -> None:
        """移除已过期的记录。"""
        self._entries = [e for e in self._entries if e.is_active(now)]

    def overlaps(self, bounds: Bounds, now: float) -> bool:
        """*bounds* 是否与任一有效记录重叠。"""
        return any(e.bounds.intersects(bounds) for e in self._entries if e.is_active(now))

    def __iter__(self) -> Iterator[AvoidedBounds]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"AvoidanceMemory({len(self._entries)} entries)"
