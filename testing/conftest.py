"""测试公共 fixtures。"""

from __future__ import annotations

import random
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from autofarm.behavior.engine import FarmingBehavior
from autofarm.control.controller import InputController
from autofarm.control.movement import MovementAccessor
from autofarm.infra.config import BotConfig


class ManualClock:
    """手动推进的单调时钟（秒）。"""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000


@pytest.fixture
def tmp_yaml(tmp_path: Path):
    """创建临时 YAML 文件的工厂 fixture。"""

    def _factory(name: str, content: str) -> Path:
        p = tmp_path / name
        p.write_text(content, encoding="utf-8")
        return p

    return _factory


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def controller() -> MagicMock:
    """记录全部调用的输入控制器。"""
    return MagicMock(spec=InputController)


@pytest.fixture
def movement(controller: MagicMock) -> MovementAccessor:
    """不真正等待、随机数固定的移动执行器。"""
    return MovementAccessor(controller, sleep=lambda _s: None, rng=random.Random(0))


@pytest.fixture
def behavior(movement: MovementAccessor, clock: ManualClock) -> FarmingBehavior:
    return FarmingBehavior(movement=movement, clock=clock)


@pytest.fixture
def make_config():
    """按关键字参数构建 BotConfig（嵌套字段用字典给出）。"""

    def _factory(**overrides: Any) -> BotConfig:
        return BotConfig.model_validate(overrides)

    return _factory
