"""Settings file loading and persistence."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

import structlog
from pydantic import ValidationError

from stockwatch.models import Settings
from stockwatch.retailers import DATA_DIR

logger = structlog.get_logger(__name__)

DEFAULTS_PATH = DATA_DIR / "config-default.json"


class SettingsError(Exception):
    """Settings exist but cannot be used; the operator has to fix them."""
    pass


class ConfigurationIncomplete(Exception):
    """Required settings are missing.

    Carries whatever partial data was found so it can pre-fill the
    configuration provider instead of being thrown away.
    """

    def __init__(self, partial: Optional[Dict[str, Any]] = None, message: str = "settings incomplete"):
        super().__init__(message)
        self.partial = partial or {}


def load_defaults(path: Path = DEFAULTS_PATH) -> Dict[str, Any]:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def read_raw(path: Union[str, Path]) -> Optional[Dict[str, Any]]:
    """Return the parsed settings file, or None when missing or unreadable."""
    p = Path(path)
    if not p.exists():
        return None
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Settings file unreadable", path=str(p), error=str(e))
        return None
    if not isinstance(data, dict):
        logger.warning("Settings file is not a JSON object", path=str(p))
        return None
    return data


def has_required_fields(raw: Dict[str, Any]) -> bool:
    """Completeness check on the raw file data; null and empty count as missing."""
    twilio = raw.get("twilio")
    if not isinstance(twilio, dict):
        return False
    return (
        bool(raw.get("phone"))
        and all(twilio.get(k) for k in ("sid", "token", "number"))
        and bool(raw.get("items"))
    )


def load_settings(path: Union[str, Path]) -> Settings:
    """Load usable settings.

    Raises ConfigurationIncomplete when the file is missing or lacks a
    required field, and SettingsError when it is present but malformed.
    """
    raw = read_raw(path)
    if raw is None:
        raise ConfigurationIncomplete({}, "no settings file")
    if not has_required_fields(raw):
        raise ConfigurationIncomplete(raw)

    try:
        settings = Settings.model_validate(raw)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {path}: {e}") from e

    if not settings.is_complete:
        raise ConfigurationIncomplete(raw)
    return settings


def save_settings(settings: Settings, path: Union[str, Path]) -> None:
    """Write the whole settings object, replacing the file.

    The data goes to a temp file next to the target first, so an interrupted
    write never leaves a truncated settings file behind.
    """
    p = Path(path)
    text = json.dumps(settings.to_json_dict(), indent=2)
    fd, tmp = tempfile.mkstemp(prefix=p.name + ".", suffix=".tmp", dir=str(p.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, p)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


class SettingsStore:
    """Owns the in-memory settings for the life of the process.

    The same store is handed to every sweep, so changes made to items in
    one sweep are seen by the next.
    """

    def __init__(self, settings: Settings, path: Union[str, Path]):
        self.settings = settings
        self.path = Path(path)

    def save(self) -> None:
        save_settings(self.settings, self.path)
        logger.debug("Settings saved", path=str(self.path))
