"""Startup gate: make sure usable settings exist before watching starts."""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from stockwatch.models import Settings
from stockwatch.providers import ConfigurationProvider
from stockwatch.retailers import load_retailers
from stockwatch.settings import (
    ConfigurationIncomplete,
    SettingsError,
    SettingsStore,
    load_defaults,
    load_settings,
    save_settings,
)

logger = structlog.get_logger(__name__)


def merge_settings(defaults: Dict[str, Any], partial: Dict[str, Any], answers: Dict[str, str]) -> Dict[str, Any]:
    """Layer provider answers over partial settings over the default template.

    The first two layers merge shallowly, so a partial ``twilio`` block
    replaces the default one as a whole.
    """
    merged = {**defaults, **partial}
    merged["phone"] = answers["phone"]
    merged["twilio"] = {"sid": answers["sid"], "token": answers["token"], "number": answers["number"]}
    if not merged.get("items"):
        merged["items"] = [{
            "name": answers["item_name"],
            "type": answers["item_type"],
            "url": answers["item_url"],
        }]
    return merged


def run_configuration(
    partial: Dict[str, Any],
    provider: ConfigurationProvider,
    path: Union[str, Path],
    retailers: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Collect the missing settings, save them and return the result."""
    retailers = load_retailers() if retailers is None else retailers
    defaults = load_defaults()
    base = {**defaults, **partial}
    need_item = not base.get("items")

    answers = provider.collect(base, retailers, need_item)
    merged = merge_settings(defaults, partial, answers)

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        raise SettingsError(f"Configured settings are invalid: {e}") from e

    save_settings(settings, path)
    logger.info("Settings saved", path=str(path), items=len(settings.items))
    return settings


def resolve_settings(
    path: Union[str, Path],
    provider: ConfigurationProvider,
    retailers: Optional[Mapping[str, str]] = None,
) -> SettingsStore:
    """Load settings, running the provider first if anything is missing."""
    try:
        settings = load_settings(path)
        logger.info("Settings loaded", path=str(path), items=len(settings.items))
    except ConfigurationIncomplete as e:
        logger.info("Settings incomplete, starting configuration", path=str(path))
        settings = run_configuration(e.partial, provider, path, retailers)
    return SettingsStore(settings, path)
