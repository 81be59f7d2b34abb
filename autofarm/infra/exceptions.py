"""AutoFarm 异常层级体系。

层级树::

    AutoFarmError
    ├── ConfigError
    ├── ControlError
    │   └── InputError
    ├── TelemetryError
    ├── BehaviorError
    └── CriticalError
        └── InactivityTimeoutError

约定：行为状态机内部的 "数据缺失" 与 "卡怪" 都不是异常，
只有 :class:`InactivityTimeoutError` 会被主动抛给宿主进程。
"""

from __future__ import annotations


# ── 基类 ──


class AutoFarmError(Exception):
    """所有 AutoFarm 异常的基类。"""


# ── 基础设施异常 ──


class ConfigError(AutoFarmError):
    """配置错误（文件缺失、字段非法等）。"""


# ── 输入层异常 ──


class ControlError(AutoFarmError):
    """输入注入层错误。"""


class InputError(ControlError):
    """单个输入动作执行失败。"""

    def __init__(self, action_name: str, reason: str = "") -> None:
        self.action_name = action_name
        msg = f"输入失败: {action_name}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ── 遥测异常 ──


class TelemetryError(AutoFarmError):
    """视觉遥测采集失败。"""


# ── 行为层异常 ──


class BehaviorError(AutoFarmError):
    """行为状态机错误。"""


# ── 不可恢复错误 ──


class CriticalError(AutoFarmError):
    """不可恢复的严重错误，需要终止。"""


class InactivityTimeoutError(CriticalError):
    """长时间找不到任何怪物，判定角色被困，需人工介入。"""

    def __init__(self, timeout_ms: int, elapsed_ms: float) -> None:
        self.timeout_ms = timeout_ms
        self.elapsed_ms = elapsed_ms
        super().__init__(
            f"超过 {timeout_ms}ms 未发现怪物 (已等待 {elapsed_ms:.0f}ms)，终止运行"
        )
