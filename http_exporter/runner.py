"""
Exporter scheduling.

Every configured exporter gets its own asyncio task running a fixed-interval
loop. All loops share one stop event; setting it ends every loop at its next
suspension point and stop() waits until all of them have closed their
exporters.

Per instance:
    CREATED -> RUNNING -> STOPPING -> STOPPED

A failed construction (unknown type, bad options) goes straight to STOPPED
without affecting other instances. A failed or timed out pass is logged and
the next tick runs as usual.
"""

import asyncio
import logging
from enum import Enum
from typing import List, Optional

from .config import GlobalConfig
from .exporters import (
    Exporter,
    ExporterConfig,
    ExporterNotFoundError,
    ExporterRegistry,
    GaugeRegistry,
    MetricLabelsMismatchError,
    OptionsError,
)
from .log import exporter_logger
from .utils import format_duration

logger = logging.getLogger("http_exporter.runner")


class RunnerState(str, Enum):
    CREATED = "created"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


def resolve_timings(config: ExporterConfig, defaults: GlobalConfig) -> ExporterConfig:
    """Return config with zero interval/timeout replaced by the global defaults."""
    update = {}
    if config.interval == 0:
        update["interval"] = defaults.scrape_interval
    if config.timeout == 0:
        update["timeout"] = defaults.scrape_timeout
    if not update:
        return config
    return config.model_copy(update=update)


class LoopClock:
    """Event loop time for the tick schedule."""

    def time(self) -> float:
        return asyncio.get_running_loop().time()

    async def wait(self, delay: float, stop_event: asyncio.Event) -> bool:
        """Wait up to delay seconds; return True if the stop event was set."""
        if stop_event.is_set():
            return True
        if delay <= 0:
            return False
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True


class ExporterRunner:
    """Drives one exporter instance until the shared stop event is set."""

    def __init__(
        self,
        config: ExporterConfig,
        registry: ExporterRegistry,
        metrics: GaugeRegistry,
        stop_event: asyncio.Event,
        clock: Optional[LoopClock] = None,
    ):
        if config.interval <= 0 or config.timeout <= 0:
            raise ValueError(f"exporter {config.name!r}: interval and timeout must be resolved before scheduling")
        self.config = config
        self.registry = registry
        self.metrics = metrics
        self.stop_event = stop_event
        self.clock = clock or LoopClock()
        self.state = RunnerState.CREATED
        self.exporter: Optional[Exporter] = None
        self.passes = 0
        self.logger = exporter_logger(config.name, config.type, config.interval, config.timeout)

    async def run(self) -> None:
        self.logger.debug("starting exporter")
        self.exporter = self._create()
        if self.exporter is None:
            self.state = RunnerState.STOPPED
            return

        self.state = RunnerState.RUNNING
        try:
            await self._loop()
        finally:
            self.state = RunnerState.STOPPING
            await self._close()
            self.state = RunnerState.STOPPED
            self.logger.debug(f"exporter stopped after {self.passes} passes")

    def _create(self) -> Optional[Exporter]:
        try:
            return self.registry.create(self.config, self.logger, self.metrics)
        except ExporterNotFoundError:
            self.logger.error(f"exporter type not found: {self.config.type}")
        except OptionsError as e:
            self.logger.error(f"failed to create exporter, invalid options ({e.stage}): {e}")
        except MetricLabelsMismatchError as e:
            self.logger.error(f"failed to create exporter, metric conflict: {e}")
        except Exception as e:
            self.logger.exception(f"failed to create exporter: {e}")
        return None

    async def _loop(self) -> None:
        clock = self.clock
        interval = self.config.interval
        next_tick = clock.time() + interval

        while True:
            if await clock.wait(next_tick - clock.time(), self.stop_event):
                return

            await self._collect_once()
            self.passes += 1

            next_tick += interval
            now = clock.time()
            if next_tick < now:
                # overran at least one tick; run the next pass right away
                next_tick = now

    async def _collect_once(self) -> None:
        collect = asyncio.ensure_future(self.exporter.collect())
        stopped = asyncio.ensure_future(self.stop_event.wait())
        try:
            done, _ = await asyncio.wait(
                {collect, stopped},
                timeout=self.config.timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            collect.cancel()
            raise
        finally:
            stopped.cancel()

        if collect not in done:
            collect.cancel()
            # collectors that ignore cancellation can keep us here past the timeout
            await asyncio.wait({collect})
            if self.stop_event.is_set():
                self.logger.debug("collection interrupted by shutdown")
            else:
                self.logger.error(f"collection timed out after {format_duration(self.config.timeout)}")

        if collect.cancelled():
            return
        exc = collect.exception()
        if exc is not None:
            self.logger.error(f"collection failed: {exc!r}", exc_info=exc)

    async def _close(self) -> None:
        try:
            await self.exporter.close()
        except Exception as e:
            self.logger.error(f"failed to close exporter: {e}")


class ExporterSupervisor:
    """Runs one ExporterRunner task per configured exporter."""

    def __init__(
        self,
        exporters: List[ExporterConfig],
        defaults: GlobalConfig,
        registry: ExporterRegistry,
        metrics: GaugeRegistry,
        clock: Optional[LoopClock] = None,
    ):
        self.stop_event = asyncio.Event()
        self.runners = [
            ExporterRunner(resolve_timings(config, defaults), registry, metrics, self.stop_event, clock)
            for config in exporters
        ]
        self._tasks: List[asyncio.Task] = []

    def start(self) -> None:
        logger.debug(f"starting {len(self.runners)} exporters")
        for runner in self.runners:
            task = asyncio.create_task(runner.run(), name=f"exporter:{runner.config.name}")
            self._tasks.append(task)

    async def wait(self) -> None:
        """Block until every runner has stopped."""
        results = await asyncio.gather(*self._tasks, return_exceptions=True)
        for runner, result in zip(self.runners, results):
            if isinstance(result, BaseException):
                logger.error(f"exporter {runner.config.name} exited with error: {result!r}")

    async def stop(self) -> None:
        logger.debug("stopping exporters")
        self.stop_event.set()
        await self.wait()
        logger.info("all exporters stopped")

    async def run(self) -> None:
        self.start()
        await self.wait()
