"""输入层 — 输入注入接口与持锁的移动动作执行器。"""

from autofarm.control.controller import InputController
from autofarm.control.movement import (
    Action,
    AvoidClick,
    Click,
    Duration,
    Fixed,
    HoldKeyFor,
    HoldKeys,
    MovementAccessor,
    MovementCoordinator,
    MovePointer,
    PressKey,
    RandomRange,
    ReleaseKey,
    ReleaseKeys,
    Rotate,
    SendSlot,
    Wait,
)

__all__ = [
    "InputController",
    "MovementAccessor",
    "MovementCoordinator",
    # actions
    "Action",
    "AvoidClick",
    "Click",
    "HoldKeyFor",
    "HoldKeys",
    "MovePointer",
    "PressKey",
    "ReleaseKey",
    "ReleaseKeys",
    "Rotate",
    "SendSlot",
    "Wait",
    # durations
    "Duration",
    "Fixed",
    "RandomRange",
]
