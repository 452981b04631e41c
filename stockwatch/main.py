#!/usr/bin/env python3
"""
Stock watcher - poll product pages and text me once when an item is in stock.

Settings come from the JSON file at SETTINGS_PATH. When it is missing or
incomplete the configuration provider (CONFIG_PROVIDER) fills the gaps and
the file is written before watching starts.

Usage:
    python -m stockwatch
"""

import asyncio
import sys

import structlog
from playwright.async_api import async_playwright

from stockwatch import config
from stockwatch.bootstrap import resolve_settings
from stockwatch.providers import get_provider
from stockwatch.settings import SettingsError, SettingsStore
from stockwatch.watcher import StockWatcher

logger = structlog.get_logger(__name__)


async def run(store: SettingsStore) -> None:
    logger.info(
        "Starting watcher",
        items=len(store.settings.items),
        interval_ms=store.settings.poll_interval_ms,
        headful=config.HEADFUL,
    )

    p = await async_playwright().start()
    try:
        browser = await p.chromium.launch(headless=not config.HEADFUL)
        try:
            watcher = StockWatcher(browser, store)
            try:
                await watcher.run_forever()
            finally:
                watcher.stop()
        finally:
            await browser.close()
    finally:
        await p.stop()


def main() -> int:
    config.configure_logging()
    try:
        store = resolve_settings(config.SETTINGS_PATH, get_provider(config.CONFIG_PROVIDER))
        asyncio.run(run(store))
    except KeyboardInterrupt:
        logger.info("Watcher stopped by user")
        return 0
    except SettingsError as e:
        logger.error("Unusable settings", error=str(e))
        return 1
    except Exception as e:
        logger.exception("Fatal error", error=str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
