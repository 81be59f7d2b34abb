"""配置管理 — 基于 Pydantic v2。

配置从 YAML 文件加载，经过 Pydantic 校验后生成不可变的配置对象。
所有时长字段单位为毫秒（``tick_interval`` 除外，单位为秒）。

使用方式::

    from autofarm.infra.config import ConfigManager

    config = ConfigManager.load("farming.yaml")
    print(config.farming.manual_targeting)
"""

from __future__ import annotations

import datetime
from pathlib import Path
from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .exceptions import ConfigError
from .file_utils import load_yaml, merge_dicts
from autofarm.data import Target
from autofarm.types import SlotType

SLOTS_PER_BAR = 10
"""每个技能栏的槽位数。"""

DEFAULT_PICKUP_PET_COOLDOWN_MS = 3000
"""拾取宠物未配置冷却时的默认召回间隔。"""


# ── 技能栏 ──


class SlotConfig(BaseModel):
    """单个技能栏槽位。"""

    model_config = {"frozen": True}

    slot_type: SlotType
    """槽位用途"""
    cooldown_ms: int | None = Field(default=None, ge=0)
    """冷却时间；None = 无冷却"""
    threshold: int | None = Field(default=None, ge=0, le=100)
    """恢复类槽位的触发阈值（百分比）"""
    enabled: bool = True
    """是否启用"""

    @model_validator(mode="after")
    def _check_threshold(self) -> SlotConfig:
        if self.threshold is not None and not self.slot_type.is_restoration:
            raise ValueError(f"阈值仅适用于恢复类槽位，{self.slot_type.value} 不支持")
        return self


class SlotBarConfig(BaseModel):
    """一个技能栏（F1–F9 之一）。"""

    model_config = {"frozen": True}

    slots: list[SlotConfig | None] = Field(default_factory=list)

    @field_validator("slots")
    @classmethod
    def _validate_slots(cls, v: list[SlotConfig | None]) -> list[SlotConfig | None]:
        if len(v) > SLOTS_PER_BAR:
            raise ValueError(f"单个技能栏最多 {SLOTS_PER_BAR} 个槽位，实际 {len(v)}")
        return v


# ── 白名单 / 目标分类 ──


class WhitelistEntry(BaseModel):
    """白名单条目：按名称框尺寸匹配怪物。"""

    model_config = {"frozen": True}

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    tolerance: int = Field(default=2, ge=0)
    """宽高允许的误差（像素）"""

    def matches(self, target: Target) -> bool:
        return (
            abs(target.bounds.w - self.width) <= self.tolerance
            and abs(target.bounds.h - self.height) <= self.tolerance
        )


class ClassificationConfig(BaseModel):
    """由目标血 / 蓝读数推断目标性质的阈值。

    - NPC: ``target_hp == npc_hp`` 且 ``target_mp == npc_mp``
    - 怪物: ``target_hp > 0`` 且 ``target_mp > 0``
    - 满血 (新接触): ``target_hp == full_hp``
    """

    model_config = {"frozen": True}

    full_hp: int = Field(default=100, ge=0, le=100)
    npc_hp: int = Field(default=100, ge=0, le=100)
    npc_mp: int = Field(default=0, ge=0, le=100)


# ── 刷怪行为 ──


class FarmingConfig(BaseModel):
    """刷怪行为配置。"""

    model_config = {"frozen": True}

    slot_bars: list[SlotBarConfig] = Field(default_factory=list)
    """技能栏，下标即 F 键序号减一"""

    manual_targeting: bool = False
    """手动选怪模式：玩家自行锁定目标，脚本只负责战斗"""
    prevent_already_attacked: bool = True
    """避开已被他人攻击的怪物"""
    circle_pattern_rotation_duration: int = Field(default=0, ge=0)
    """绕圈搜索时侧移键按住时长；0 = 关闭绕圈"""
    obstacle_avoidance_max_try: int = Field(default=3, ge=1)
    """非满血目标的最大避障次数"""
    already_attacked_timeout_ms: int = Field(default=5000, ge=0)
    """目标残血且双方血量均无变化超过该时长，判定为被抢怪"""

    close_range_distance: int = Field(default=325, gt=0)
    """原地刷怪时的最大索敌距离（距屏幕中心）"""
    wide_range_distance: int = Field(default=1000, gt=0)
    """开启绕圈后的最大索敌距离"""
    ignore_area_bottom: int = Field(default=110, ge=0)
    """忽略屏幕底部 UI 区域的高度"""

    @property
    def max_distance(self) -> int:
        """当前模式下的最大索敌距离。"""
        if self.circle_pattern_rotation_duration == 0:
            return self.close_range_distance
        return self.wide_range_distance

    def slots_of(self, slot_type: SlotType) -> list[tuple[int, int]]:
        """所有启用的指定用途槽位 ``(bar, slot)``，按技能栏顺序。"""
        result: list[tuple[int, int]] = []
        for bar_index, bar in enumerate(self.slot_bars):
            for slot_index, slot in enumerate(bar.slots):
                if slot is not None and slot.enabled and slot.slot_type == slot_type:
                    result.append((bar_index, slot_index))
        return result

    def slot_index(self, slot_type: SlotType) -> tuple[int, int] | None:
        """第一个启用的指定用途槽位；未配置返回 ``None``。"""
        slots = self.slots_of(slot_type)
        return slots[0] if slots else None

    def get_slot(self, bar_index: int, slot_index: int) -> SlotConfig | None:
        try:
            return self.slot_bars[bar_index].slots[slot_index]
        except IndexError:
            return None

    def get_slot_cooldown(self, bar_index: int, slot_index: int) -> int | None:
        """槽位冷却时长；槽位不存在或未设置冷却返回 ``None``。"""
        slot = self.get_slot(bar_index, slot_index)
        if slot is None:
            return None
        return slot.cooldown_ms


# ── 日志 ──


class LogConfig(BaseModel):
    """日志配置。"""

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    """日志级别"""
    root: Path = Path("log")
    """日志保存根目录"""
    dir: Path | None = None
    """日志保存路径。自动按日期生成"""
    save_images: bool = False
    """放弃攻击时是否保存截图"""

    @model_validator(mode="after")
    def _set_log_dir(self) -> LogConfig:
        if self.dir is None:
            ts = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            object.__setattr__(self, "dir", self.root / ts)
        return self


# ── 顶层配置 ──


class BotConfig(BaseModel):
    """机器人配置（顶层聚合）。"""

    model_config = {"frozen": True}

    farming: FarmingConfig = Field(default_factory=FarmingConfig)
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    log: LogConfig = Field(default_factory=LogConfig)

    whitelist_enabled: bool = False
    """只攻击白名单内的怪物"""
    whitelist: list[WhitelistEntry] = Field(default_factory=list)
    """白名单"""
    inactivity_timeout: int = Field(default=0, ge=0)
    """持续找不到怪物的超时时长；0 = 关闭"""
    obstacle_avoidance_cooldown: int = Field(default=3500, ge=0)
    """目标血量多久没变化即触发避障"""
    tick_interval: float = Field(default=0.05, ge=0)
    """主循环间隔（秒）"""

    def match_whitelist(self, target: Target) -> bool:
        """目标是否命中白名单。"""
        return any(entry.matches(target) for entry in self.whitelist)

    @classmethod
    def from_yaml(cls, path: str | Path) -> BotConfig:
        """从 YAML 文件加载配置。"""
        data = load_yaml(path)
        return cls.model_validate(data)


# ── ConfigManager ──


class ConfigManager:
    """配置管理器 — 提供加载入口。"""

    @staticmethod
    def load(path: str | Path, overrides: dict[str, Any] | None = None) -> BotConfig:
        """从文件加载配置，*overrides* 会递归覆盖文件内容。文件不存在时使用默认配置。"""
        path = Path(path)
        if path.exists():
            data = load_yaml(path)
            logger.info("已加载配置: {}", path)
        else:
            logger.warning("配置文件 {} 不存在，使用默认配置", path)
            data = {}
        if overrides:
            data = merge_dicts(data, overrides)
        try:
            return BotConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"配置校验失败: {path}\n{e}") from e
