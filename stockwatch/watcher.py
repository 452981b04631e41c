import asyncio
from typing import Awaitable, Callable, Mapping, Optional, Set

import structlog
from playwright.async_api import Browser

from stockwatch import config
from stockwatch.models import Settings, WatchedItem
from stockwatch.notify import notify_in_stock
from stockwatch.probe import probe_page
from stockwatch.retailers import load_retailers, selector_for
from stockwatch.settings import SettingsStore

logger = structlog.get_logger(__name__)

Prober = Callable[[Browser, str, str], Awaitable[bool]]
Notifier = Callable[[WatchedItem, Settings], Awaitable[bool]]


class StockWatcher:
    """Sweeps the watched items and alerts once per item when it comes in stock.

    Each sweep starts one task per item that is not yet in stock and then
    schedules the next sweep without waiting for those tasks, so sweeps can
    overlap on slow networks.
    """

    def __init__(
        self,
        browser: Browser,
        store: SettingsStore,
        retailers: Optional[Mapping[str, str]] = None,
        prober: Prober = probe_page,
        notifier: Notifier = notify_in_stock,
        persist: Optional[bool] = None,
    ):
        self.browser = browser
        self.store = store
        self.retailers = load_retailers() if retailers is None else retailers
        self.prober = prober
        self.notifier = notifier
        self.persist = config.PERSIST_STOCK_STATE if persist is None else persist
        self.pending: Set[asyncio.Task] = set()
        self.sweeps = 0
        self._next_sweep: Optional[asyncio.TimerHandle] = None
        self._stopped = asyncio.Event()

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self.pending.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self.pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background task failed", error=str(task.exception()))

    def run_cycle(self) -> None:
        """Dispatch one sweep and schedule the next one."""
        if self._stopped.is_set():
            return
        self.sweeps += 1
        settings = self.store.settings
        for item in settings.items:
            if not item.in_stock:
                self._spawn(self.check_item(item))

        delay = settings.poll_interval_ms / 1000
        self._next_sweep = asyncio.get_running_loop().call_later(delay, self.run_cycle)
        logger.debug("Next sweep scheduled", sweep=self.sweeps, delay_s=delay)

    async def check_item(self, item: WatchedItem) -> bool:
        """Check one item; returns True when it was found in stock."""
        try:
            selector = selector_for(item.type, self.retailers)
            if selector is None:
                logger.warning("Unknown retailer", item=item.name, retailer=item.type)
                found = False
            else:
                found = await self.prober(self.browser, item.url, selector)

            if not found:
                logger.info("Out of stock", item=item.name)
                return False

            self._mark_in_stock(item)
            return True
        except Exception as e:
            logger.error("Error checking for item", item=item.name, error=str(e), exc_info=config.DEBUG)
            return False

    def _mark_in_stock(self, item: WatchedItem) -> None:
        # an overlapping sweep may already have flipped it
        if item.in_stock:
            return
        item.in_stock = True
        self._spawn(self.notifier(item, self.store.settings))
        logger.info("IN STOCK", item=item.name, url=item.url)

        if self.persist:
            try:
                self.store.save()
            except OSError as e:
                logger.error("Could not save settings", path=str(self.store.path), error=str(e))

    async def run_forever(self) -> None:
        """Start sweeping; returns only after stop()."""
        self.run_cycle()
        await self._stopped.wait()

    def stop(self) -> None:
        if self._next_sweep is not None:
            self._next_sweep.cancel()
            self._next_sweep = None
        self._stopped.set()
