import logging
import os

import structlog
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

def _env_bool(name: str, default: bool=False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1","true","t","yes","y","on")

DEBUG    = _env_bool("DEBUG", False)
HEADFUL  = _env_bool("HEADFUL", False)

# Rewrite the settings file whenever an item flips to in stock.
# Turning this off keeps "already notified" state in memory only.
PERSIST_STOCK_STATE = _env_bool("PERSIST_STOCK_STATE", True)

LOG_LEVEL       = os.getenv("LOG_LEVEL", "INFO").strip().upper()
SETTINGS_PATH   = os.getenv("SETTINGS_PATH", "config.json")
CONFIG_PROVIDER = os.getenv("CONFIG_PROVIDER", "interactive").strip().lower()

# Static desktop UA; some retailers block the headless default
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 11_1_0) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/87.0.4280.88 Safari/537.36"
)

PROBE_TIMEOUT_MS    = 5000
# Best-effort wait for the network to settle after load; pages that keep
# connections open (beacons, websockets) never reach full idle.
IDLE_TIMEOUT_MS     = 10000
DEFAULT_INTERVAL_MS = 120000


def configure_logging() -> None:
    """Set up structlog for console output with timestamps."""
    level_name = "DEBUG" if DEBUG else LOG_LEVEL
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
