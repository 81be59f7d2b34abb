"""全局枚举类型定义。

所有与游戏语义相关的枚举集中于此，供各层引用。
"""

from __future__ import annotations

from enum import Enum


# ── 枚举基类 ──


class BaseEnum(Enum):
    """提供更友好的中文报错信息。"""

    @classmethod
    def _missing_(cls, value: object) -> None:
        supported = ", ".join(str(m.value) for m in cls)
        raise ValueError(f'"{value}" 不是合法的 {cls.__name__} 取值。 支持: [{supported}]')


class StrEnum(str, BaseEnum):
    """字符串枚举基类。"""


# ── 目标 ──


class MobType(StrEnum):
    """怪物类型。"""

    passive = "passive"
    """被动怪（不主动攻击）"""
    aggressive = "aggressive"
    """主动怪"""


class TargetType(StrEnum):
    """识别实体的类别标签。"""

    aggressive_mob = "aggressive_mob"
    """主动怪名称框"""
    passive_mob = "passive_mob"
    """被动怪名称框"""
    target_marker = "target_marker"
    """已锁定目标的准星标记"""

    @property
    def mob_type(self) -> MobType | None:
        """怪物类型；准星标记返回 ``None``。"""
        if self is TargetType.aggressive_mob:
            return MobType.aggressive
        if self is TargetType.passive_mob:
            return MobType.passive
        return None


# ── 技能栏 ──


class SlotType(StrEnum):
    """技能栏槽位用途。"""

    food = "Food"
    """食物 (回血)"""
    pill = "Pill"
    """药丸 (低血量回血)"""
    mp_restorer = "MpRestorer"
    """回蓝道具"""
    fp_restorer = "FpRestorer"
    """回 FP 道具"""
    pickup_pet = "PickupPet"
    """拾取宠物"""
    pickup_motion = "PickupMotion"
    """拾取动作"""
    attack_skill = "AttackSkill"
    """攻击技能"""
    buff_skill = "BuffSkill"
    """增益技能"""
    chat_message = "ChatMessage"
    """喊话"""

    @property
    def is_restoration(self) -> bool:
        """是否为按阈值触发的恢复类槽位。"""
        return self in (
            SlotType.food,
            SlotType.pill,
            SlotType.mp_restorer,
            SlotType.fp_restorer,
        )


# ── 移动 ──


class RotationDirection(StrEnum):
    """视角旋转方向。"""

    left = "left"
    right = "right"

    @property
    def key(self) -> str:
        """旋转对应的按键名。"""
        return "ArrowLeft" if self is RotationDirection.left else "ArrowRight"


class KeyMode(StrEnum):
    """按键模式。"""

    press = "press"
    hold = "hold"
    release = "release"
