"""移动动作序列与串行执行器。

行为层把一次移动描述为一组 *动作* （按键、按住、等待、旋转、点击……），
交给 :class:`MovementAccessor` 在持锁状态下一次性执行完毕，保证同一时刻
只有一个动作序列作用于游戏客户端。

使用方式::

    from autofarm.control.movement import (
        Fixed, HoldKeys, MovementAccessor, ReleaseKeys, Wait,
    )

    accessor = MovementAccessor(controller)
    accessor.play([
        HoldKeys(("W", "Space")),
        Wait(Fixed(800)),
        ReleaseKeys(("Space", "W")),
    ])
"""

from __future__ import annotations

import random
import threading
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Union

from loguru import logger

from autofarm.control.controller import InputController
from autofarm.data import Point
from autofarm.infra.exceptions import InputError
from autofarm.types import KeyMode, RotationDirection


# ═══════════════════════════════════════════════════════════════════════════════
# 时长
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Fixed:
    """固定时长（毫秒）。"""

    ms: int

    def resolve(self, rng: random.Random) -> int:
        return self.ms


@dataclass(frozen=True, slots=True)
class RandomRange:
    """``[min_ms, max_ms]`` 内均匀随机的时长（毫秒）。"""

    min_ms: int
    max_ms: int

    def __post_init__(self) -> None:
        if self.min_ms > self.max_ms:
            raise ValueError(f"随机时长区间无效: [{self.min_ms}, {self.max_ms}]")

    def resolve(self, rng: random.Random) -> int:
        return rng.randint(self.min_ms, self.max_ms)


Duration = Union[Fixed, RandomRange]


# ═══════════════════════════════════════════════════════════════════════════════
# 动作
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PressKey:
    """按下并抬起。"""

    key: str


@dataclass(frozen=True, slots=True)
class HoldKeys:
    """依次按住多个键（不抬起）。"""

    keys: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ReleaseKey:
    key: str


@dataclass(frozen=True, slots=True)
class ReleaseKeys:
    """依次抬起多个键。"""

    keys: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class HoldKeyFor:
    """按住一个键指定时长后抬起。"""

    key: str
    duration: Duration


@dataclass(frozen=True, slots=True)
class Wait:
    duration: Duration


@dataclass(frozen=True, slots=True)
class Rotate:
    """按住方向键旋转视角。"""

    direction: RotationDirection
    duration: Duration


@dataclass(frozen=True, slots=True)
class MovePointer:
    point: Point


@dataclass(frozen=True, slots=True)
class Click:
    """攻击点击。"""

    point: Point


@dataclass(frozen=True, slots=True)
class AvoidClick:
    """躲避点击（走向地面，不攻击）。"""

    point: Point


@dataclass(frozen=True, slots=True)
class SendSlot:
    bar_index: int
    slot_index: int


Action = Union[
    PressKey,
    HoldKeys,
    ReleaseKey,
    ReleaseKeys,
    HoldKeyFor,
    Wait,
    Rotate,
    MovePointer,
    Click,
    AvoidClick,
    SendSlot,
]


# ═══════════════════════════════════════════════════════════════════════════════
# 执行器
# ═══════════════════════════════════════════════════════════════════════════════


class MovementCoordinator:
    """把动作翻译为 :class:`InputController` 调用并按顺序执行。

    Parameters
    ----------
    controller:
        输入注入控制器。
    sleep:
        阻塞等待函数，参数为秒。测试中可替换为空操作。
    rng:
        随机数源（随机时长用）。
    """

    def __init__(
        self,
        controller: InputController,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._controller = controller
        self._sleep = sleep
        self._rng = rng or random.Random()

    @property
    def controller(self) -> InputController:
        return self._controller

    @property
    def rng(self) -> random.Random:
        return self._rng

    def _wait(self, duration: Duration) -> None:
        ms = duration.resolve(self._rng)
        if ms > 0:
            self._sleep(ms / 1000)

    def execute(self, action: Action) -> None:
        """执行单个动作。"""
        ctrl = self._controller
        match action:
            case PressKey(key=key):
                ctrl.send_key(key, KeyMode.press)
            case HoldKeys(keys=keys):
                for key in keys:
                    ctrl.send_key(key, KeyMode.hold)
            case ReleaseKey(key=key):
                ctrl.send_key(key, KeyMode.release)
            case ReleaseKeys(keys=keys):
                for key in keys:
                    ctrl.send_key(key, KeyMode.release)
            case HoldKeyFor(key=key, duration=duration):
                ctrl.send_key(key, KeyMode.hold)
                self._wait(duration)
                ctrl.send_key(key, KeyMode.release)
            case Wait(duration=duration):
                self._wait(duration)
            case Rotate(direction=direction, duration=duration):
                ctrl.send_key(direction.key, KeyMode.hold)
                self._wait(duration)
                ctrl.send_key(direction.key, KeyMode.release)
            case MovePointer(point=point):
                ctrl.move_pointer(point)
            case Click(point=point):
                ctrl.click(point)
            case AvoidClick(point=point):
                ctrl.avoid_click(point)
            case SendSlot(bar_index=bar, slot_index=slot):
                ctrl.send_slot(bar, slot)
            case _:
                raise InputError(type(action).__name__, "未知动作类型")

    def play(self, actions: Sequence[Action]) -> None:
        """按顺序执行一组动作。"""
        for action in actions:
            self.execute(action)


class MovementAccessor:
    """持锁访问 :class:`MovementCoordinator`。

    每次 :meth:`play` / :meth:`session` 都会独占执行器，退出时无条件释放锁，
    即便动作序列中途抛出异常。
    """

    def __init__(
        self,
        controller: InputController,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._coordinator = MovementCoordinator(controller, sleep=sleep, rng=rng)
        self._lock = threading.Lock()

    @property
    def rng(self) -> random.Random:
        return self._coordinator.rng

    @contextmanager
    def session(self) -> Iterator[MovementCoordinator]:
        """独占执行器的上下文。"""
        with self._lock:
            yield self._coordinator

    def play(self, actions: Sequence[Action]) -> None:
        """持锁执行一组动作。"""
        with self.session() as coordinator:
            logger.trace("执行动作序列: {}", actions)
            coordinator.play(actions)
