"""宿主主循环。

按固定间隔从视觉层取一帧遥测，交给 :class:`~autofarm.behavior.FarmingBehavior`
决策。行为层抛出的 :class:`~autofarm.infra.exceptions.InactivityTimeoutError`
在这里被记录为 CRITICAL 并终止进程，不做任何重试。

使用方式::

    runner = BotRunner(FarmingBehavior(controller), vision, config)
    runner.run()
"""

from __future__ import annotations

import time
from typing import Callable, Protocol

from loguru import logger

from autofarm.behavior.engine import FarmingBehavior
from autofarm.infra.config import BotConfig
from autofarm.infra.exceptions import InactivityTimeoutError, TelemetryError
from autofarm.infra.logger import setup_logger
from autofarm.telemetry import Telemetry


class TelemetrySource(Protocol):
    """视觉遥测来源：每次调用返回当前帧的快照。"""

    def capture(self) -> Telemetry: ...


class BotRunner:
    """刷怪主循环。

    Parameters
    ----------
    behavior:
        刷怪状态机。
    source:
        遥测来源。
    config:
        全局配置；``tick_interval`` 决定两帧之间的间隔。
    sleep:
        阻塞等待函数（秒）。
    """

    def __init__(
        self,
        behavior: FarmingBehavior,
        source: TelemetrySource,
        config: BotConfig,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._behavior = behavior
        self._source = source
        self._config = config
        self._sleep = sleep
        self._running = False
        self._ticks = 0

    @property
    def ticks(self) -> int:
        """已执行的帧数。"""
        return self._ticks

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """请求在当前帧结束后退出循环。"""
        self._running = False

    def tick(self) -> None:
        """执行一帧。

        Raises
        ------
        TelemetryError
            视觉层返回的不是 :class:`Telemetry`。
        """
        telemetry = self._source.capture()
        if not isinstance(telemetry, Telemetry):
            raise TelemetryError(f"遥测来源返回了 {type(telemetry).__name__}，应为 Telemetry")
        self._behavior.run_iteration(telemetry, self._config)
        self._ticks += 1

    def run(self, max_ticks: int | None = None) -> int:
        """运行主循环，返回执行的帧数。

        Parameters
        ----------
        max_ticks:
            最多执行的帧数，``None`` 表示直到 :meth:`stop` 被调用。

        Raises
        ------
        SystemExit
            空闲超时（退出码 1）。
        """
        self._running = True
        self._behavior.start(self._config)
        try:
            while self._running:
                if max_ticks is not None and self._ticks >= max_ticks:
                    break
                try:
                    self.tick()
                except InactivityTimeoutError as e:
                    logger.critical("{}，终止运行", e)
                    raise SystemExit(1) from e
                if self._running:
                    self._sleep(self._config.tick_interval)
        finally:
            self._running = False
            self._behavior.stop(self._config)
        return self._ticks


def configure_logging(config: BotConfig) -> None:
    """按配置初始化日志（控制台 + 按日期的日志目录）。"""
    setup_logger(
        log_dir=config.log.dir,
        level=config.log.level,
        save_images=config.log.save_images,
    )


def run_farming(
    behavior: FarmingBehavior,
    source: TelemetrySource,
    config: BotConfig,
    max_ticks: int | None = None,
) -> int:
    """便捷函数：初始化日志，构建 :class:`BotRunner` 并运行。"""
    configure_logging(config)
    try:
        return BotRunner(behavior, source, config).run(max_ticks)
    except KeyboardInterrupt:
        logger.info("用户中断")
        return 0
