"""输入注入控制器接口。

提供纯粹的输入操作能力（按键、指针移动、点击、技能栏触发），
**不做**任何图像识别或行为决策。具体的平台实现（窗口消息、
浏览器事件注入等）由宿主程序提供。

所有坐标为客户端窗口内的像素坐标。

使用方式::

    ctrl = SomePlatformController(window)
    ctrl.send_key("Escape", KeyMode.press)
    ctrl.click(Point(400, 320))
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from loguru import logger

from autofarm.data import Point
from autofarm.types import KeyMode


class InputController(ABC):
    """输入注入控制器抽象基类。

    子类必须实现全部抽象方法；:meth:`send_slot` 有基于
    :meth:`send_key` 的默认实现。
    """

    # ── 键盘 ──

    @abstractmethod
    def send_key(self, key: str, mode: KeyMode) -> None:
        """发送按键事件。

        Parameters
        ----------
        key:
            键名（如 ``"W"``、``"Space"``、``"Escape"``、``"F1"``）。
        mode:
            按下并抬起 / 仅按下 / 仅抬起。
        """
        ...

    # ── 指针 ──

    @abstractmethod
    def move_pointer(self, point: Point) -> None:
        """移动鼠标指针。"""
        ...

    @abstractmethod
    def click(self, point: Point) -> None:
        """攻击点击：指针移到 *point*，仅当客户端显示攻击光标时按下。"""
        ...

    @abstractmethod
    def avoid_click(self, point: Point) -> None:
        """躲避点击：指针移到 *point*，仅当 **不是** 攻击光标时按下（走到地面）。"""
        ...

    # ── 技能栏 ──

    def send_slot(self, bar_index: int, slot_index: int) -> None:
        """触发技能栏槽位：先切换到 ``F{bar+1}`` 技能栏，再按槽位数字键。"""
        logger.debug("触发槽位 F{}-{}", bar_index + 1, slot_index)
        self.send_key(f"F{bar_index + 1}", KeyMode.press)
        self.send_key(str(slot_index), KeyMode.press)
