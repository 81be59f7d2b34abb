"""测试配置系统。"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from autofarm.data import Bounds, Target
from autofarm.infra.config import (
    BotConfig,
    ClassificationConfig,
    ConfigManager,
    FarmingConfig,
    LogConfig,
    SlotBarConfig,
    SlotConfig,
    WhitelistEntry,
)
from autofarm.infra.exceptions import ConfigError
from autofarm.types import SlotType, TargetType


# ── SlotConfig / SlotBarConfig ──


class TestSlotConfig:
    def test_from_dict(self):
        slot = SlotConfig.model_validate({"slot_type": "Food", "cooldown_ms": 1500, "threshold": 60})
        assert slot.slot_type == SlotType.food
        assert slot.cooldown_ms == 1500
        assert slot.enabled

    def test_invalid_type(self):
        with pytest.raises(ValidationError):
            SlotConfig.model_validate({"slot_type": "Teleport"})

    def test_negative_cooldown(self):
        with pytest.raises(ValidationError):
            SlotConfig(slot_type=SlotType.food, cooldown_ms=-1)

    def test_threshold_range(self):
        with pytest.raises(ValidationError):
            SlotConfig(slot_type=SlotType.food, threshold=101)

    def test_threshold_only_for_restoration(self):
        with pytest.raises(ValidationError):
            SlotConfig(slot_type=SlotType.attack_skill, threshold=50)

    def test_bar_limit(self):
        with pytest.raises(ValidationError):
            SlotBarConfig(slots=[None] * 11)

    def test_frozen(self):
        slot = SlotConfig(slot_type=SlotType.food)
        with pytest.raises(ValidationError):
            slot.enabled = False


# ── FarmingConfig ──


class TestFarmingConfig:
    def test_defaults(self):
        cfg = FarmingConfig()
        assert cfg.obstacle_avoidance_max_try == 3
        assert cfg.already_attacked_timeout_ms == 5000
        assert cfg.ignore_area_bottom == 110
        assert cfg.prevent_already_attacked
        assert not cfg.manual_targeting

    def test_max_distance(self):
        assert FarmingConfig().max_distance == 325
        assert FarmingConfig(circle_pattern_rotation_duration=200).max_distance == 1000

    def test_slot_lookup(self):
        cfg = FarmingConfig.model_validate({
            "slot_bars": [
                {"slots": [None, {"slot_type": "PickupPet", "cooldown_ms": 4000}]},
                {"slots": [{"slot_type": "PickupPet", "enabled": False}, {"slot_type": "Food"}]},
            ]
        })
        assert cfg.slot_index(SlotType.pickup_pet) == (0, 1)
        assert cfg.slots_of(SlotType.food) == [(1, 1)]
        assert cfg.slot_index(SlotType.pill) is None
        assert cfg.get_slot_cooldown(0, 1) == 4000
        assert cfg.get_slot_cooldown(1, 1) is None
        assert cfg.get_slot_cooldown(0, 0) is None
        assert cfg.get_slot_cooldown(5, 5) is None

    def test_max_try_must_be_positive(self):
        with pytest.raises(ValidationError):
            FarmingConfig(obstacle_avoidance_max_try=0)


# ── 白名单 / 分类 ──


class TestWhitelist:
    def test_match_with_tolerance(self):
        entry = WhitelistEntry(width=40, height=10)
        assert entry.matches(Target(TargetType.passive_mob, Bounds(0, 0, 42, 8)))
        assert not entry.matches(Target(TargetType.passive_mob, Bounds(0, 0, 43, 10)))

    def test_bot_match_any(self):
        cfg = BotConfig(
            whitelist=[WhitelistEntry(width=40, height=10), WhitelistEntry(width=80, height=12)]
        )
        assert cfg.match_whitelist(Target(TargetType.aggressive_mob, Bounds(5, 5, 80, 12)))
        assert not cfg.match_whitelist(Target(TargetType.aggressive_mob, Bounds(5, 5, 60, 12)))

    def test_classification_defaults(self):
        cfg = ClassificationConfig()
        assert (cfg.full_hp, cfg.npc_hp, cfg.npc_mp) == (100, 100, 0)


# ── LogConfig ──


class TestLogConfig:
    def test_dir_auto_generated(self):
        cfg = LogConfig()
        assert cfg.dir is not None
        assert str(cfg.root) in str(cfg.dir)

    def test_invalid_level(self):
        with pytest.raises(ValidationError):
            LogConfig(level="VERBOSE")


# ── BotConfig / ConfigManager ──


class TestBotConfig:
    def test_defaults(self):
        cfg = BotConfig()
        assert cfg.inactivity_timeout == 0
        assert cfg.obstacle_avoidance_cooldown == 3500
        assert not cfg.whitelist_enabled

    def test_from_yaml(self, tmp_yaml):
        content = """\
farming:
  manual_targeting: true
  circle_pattern_rotation_duration: 150
  slot_bars:
    - slots:
        - slot_type: Food
          threshold: 55
        - null
        - slot_type: PickupPet
whitelist_enabled: true
whitelist:
  - width: 64
    height: 11
inactivity_timeout: 600000
log:
  level: DEBUG
"""
        cfg = BotConfig.from_yaml(tmp_yaml("farm.yaml", content))
        assert cfg.farming.manual_targeting
        assert cfg.farming.circle_pattern_rotation_duration == 150
        assert cfg.farming.slot_index(SlotType.pickup_pet) == (0, 2)
        assert cfg.whitelist[0].width == 64
        assert cfg.inactivity_timeout == 600000
        assert cfg.log.level == "DEBUG"


class TestConfigManager:
    def test_missing_file_uses_defaults(self, tmp_path):
        cfg = ConfigManager.load(tmp_path / "nope.yaml")
        assert cfg.farming == FarmingConfig()
        assert cfg.inactivity_timeout == 0

    def test_overrides(self, tmp_yaml):
        path = tmp_yaml("farm.yaml", "farming:\n  manual_targeting: true\n")
        cfg = ConfigManager.load(path, overrides={"farming": {"ignore_area_bottom": 90}})
        assert cfg.farming.manual_targeting
        assert cfg.farming.ignore_area_bottom == 90

    def test_invalid_wrapped(self, tmp_yaml):
        path = tmp_yaml("bad.yaml", "inactivity_timeout: -5\n")
        with pytest.raises(ConfigError):
            ConfigManager.load(path)
