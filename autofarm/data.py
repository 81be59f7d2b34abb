"""目标与几何值类型。

视觉识别层产出的实体均为不可变值对象，所有坐标为客户端窗口内的像素坐标
（左上角为原点）。

使用方式::

    from autofarm.data import Bounds, Target
    from autofarm.types import TargetType

    mob = Target(TargetType.aggressive_mob, Bounds(400, 300, 60, 12))
    mob.attack_coords                 # Point(x=430, y=342)
    Bounds(10, 10, 2, 2).grow_by(5)   # Bounds(x=5, y=5, w=12, h=12)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from autofarm.types import MobType, TargetType

ATTACK_OFFSET_Y = 30
"""名称框底边到怪物模型点击点的纵向偏移 (像素)。"""


@dataclass(frozen=True, slots=True)
class Point:
    """窗口像素坐标点。"""

    x: int
    y: int

    def distance_to(self, other: Point) -> float:
        """与另一点的欧氏距离。"""
        return math.hypot(self.x - other.x, self.y - other.y)

    def __repr__(self) -> str:
        return f"Point(x={self.x}, y={self.y})"


@dataclass(frozen=True, slots=True)
class Bounds:
    """矩形区域。

    Parameters
    ----------
    x, y:
        左上角像素坐标。
    w, h:
        宽度与高度，不可为负。
    """

    x: int
    y: int
    w: int
    h: int

    def __post_init__(self) -> None:
        if self.w < 0 or self.h < 0:
            raise ValueError(f"Bounds 尺寸无效: w={self.w}, h={self.h}（需满足 w ≥ 0, h ≥ 0）")

    # ── 构造 ──

    @classmethod
    def around(cls, point: Point, margin: int) -> Bounds:
        """以 *point* 为中心、边长 ``2 * margin`` 的正方形。"""
        return cls(point.x - margin, point.y - margin, margin * 2, margin * 2)

    def to_tuple(self) -> tuple[int, int, int, int]:
        """转为 (x, y, w, h) 元组。"""
        return (self.x, self.y, self.w, self.h)

    # ── 变换 ──

    def grow_by(self, margin: int) -> Bounds:
        """四周均匀扩展 *margin* 像素，返回新的 Bounds。"""
        return Bounds(
            self.x - margin,
            self.y - margin,
            self.w + margin * 2,
            self.h + margin * 2,
        )

    # ── 查询 ──

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    @property
    def lowest_center(self) -> Point:
        """底边中点。"""
        return Point(self.x + self.w // 2, self.bottom)

    def intersects(self, other: Bounds) -> bool:
        """两个区域是否重叠（边界相接也算重叠）。"""
        return (
            self.x <= other.right
            and other.x <= self.right
            and self.y <= other.bottom
            and other.y <= self.bottom
        )

    def __repr__(self) -> str:
        return f"Bounds(x={self.x}, y={self.y}, w={self.w}, h={self.h})"


@dataclass(frozen=True, slots=True)
class Target:
    """单帧识别出的候选实体。

    Attributes
    ----------
    target_type:
        类别标签（主动怪 / 被动怪 / 目标准星）。
    bounds:
        名称框（或准星）在窗口中的区域。
    """

    target_type: TargetType
    bounds: Bounds

    @property
    def mob_type(self) -> MobType | None:
        return self.target_type.mob_type

    @property
    def is_aggressive(self) -> bool:
        return self.target_type is TargetType.aggressive_mob

    @property
    def is_passive(self) -> bool:
        return self.target_type is TargetType.passive_mob

    @property
    def attack_coords(self) -> Point:
        """攻击点击点：名称框底边中点下方的怪物模型。"""
        point = self.bounds.lowest_center
        return Point(point.x, point.y + ATTACK_OFFSET_Y)

    def active_avoid_coords(self, offset: int) -> Point:
        """躲避点击点：攻击点再向下偏移 *offset* 像素的地面位置。"""
        point = self.attack_coords
        return Point(point.x, point.y + offset)
