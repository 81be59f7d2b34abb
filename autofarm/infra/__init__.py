"""基础设施层 — 日志、配置、异常体系、文件工具。"""

from .config import (
    BotConfig,
    ClassificationConfig,
    ConfigManager,
    FarmingConfig,
    LogConfig,
    SlotBarConfig,
    SlotConfig,
    WhitelistEntry,
)
from .exceptions import (
    AutoFarmError,
    BehaviorError,
    ConfigError,
    ControlError,
    CriticalError,
    InactivityTimeoutError,
    InputError,
    TelemetryError,
)
from .file_utils import load_yaml, merge_dicts
from .logger import save_image, setup_logger

__all__ = [
    # config
    "BotConfig",
    "ClassificationConfig",
    "ConfigManager",
    "FarmingConfig",
    "LogConfig",
    "SlotBarConfig",
    "SlotConfig",
    "WhitelistEntry",
    # exceptions
    "AutoFarmError",
    "BehaviorError",
    "ConfigError",
    "ControlError",
    "CriticalError",
    "InactivityTimeoutError",
    "InputError",
    "TelemetryError",
    # file_utils
    "load_yaml",
    "merge_dicts",
    # logger
    "setup_logger",
    "save_image",
]
