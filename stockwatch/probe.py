from playwright.async_api import Browser, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from stockwatch import config


async def _settle(page: Page, timeout_ms: int) -> None:
    # Busy pages may never go fully idle; carry on with what has loaded.
    try:
        await page.wait_for_load_state("networkidle", timeout=timeout_ms)
    except PlaywrightTimeoutError:
        pass


async def probe_page(browser: Browser, url: str, selector: str,
                     timeout_ms: int = config.PROBE_TIMEOUT_MS,
                     idle_timeout_ms: int = config.IDLE_TIMEOUT_MS) -> bool:
    """Load ``url`` in its own context and report whether ``selector`` shows up.

    Only the idle wait and the selector wait are allowed to time out; a
    selector timeout is a negative result. Navigation and context errors
    propagate to the caller.
    """
    ctx = await browser.new_context(user_agent=config.USER_AGENT, locale="en-US")
    try:
        page = await ctx.new_page()
        await page.goto(url, wait_until="load")
        await _settle(page, idle_timeout_ms)
        try:
            await page.wait_for_selector(selector, state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError:
            return False
        return True
    finally:
        await ctx.close()
