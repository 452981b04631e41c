"""Configuration providers.

A provider fills in whatever the settings file is missing. Each one gets
the current values as defaults and returns a dict of answers with the keys
phone, sid, token, number and, when ``need_item`` is set, item_name,
item_type and item_url.
"""

import os
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

from stockwatch.retailers import normalize_retailer
from stockwatch.settings import SettingsError


class ConfigurationProvider(Protocol):
    def collect(self, defaults: Dict[str, Any], retailers: Mapping[str, str], need_item: bool) -> Dict[str, str]:
        ...


def _first_item(defaults: Dict[str, Any]) -> Dict[str, Any]:
    items = defaults.get("items") or []
    first = items[0] if items else {}
    return first if isinstance(first, dict) else {}


def prompt_defaults(defaults: Dict[str, Any]) -> Dict[str, str]:
    """Flatten settings data into the answer keys used by providers."""
    twilio = defaults.get("twilio") or {}
    item = _first_item(defaults)
    return {
        "phone": defaults.get("phone") or "",
        "sid": twilio.get("sid") or "",
        "token": twilio.get("token") or "",
        "number": twilio.get("number") or "",
        "item_name": item.get("name") or "",
        "item_type": item.get("type") or "",
        "item_url": item.get("url") or "",
    }


class InteractiveWizard:
    """Asks for the missing settings on the terminal."""

    def __init__(self, input_fn: Callable[[str], str] = input, output_fn: Callable[..., None] = print):
        self.input_fn = input_fn
        self.output_fn = output_fn

    def _ask(self, description: str, default: str,
             validate: Optional[Callable[[str], str]] = None) -> str:
        while True:
            suffix = f" ({default})" if default else ""
            answer = self.input_fn(f"{description}{suffix}: ").strip()
            value = answer or default
            if not value:
                self.output_fn(f"{description} is required")
                continue
            if validate is None:
                return value
            try:
                return validate(value)
            except ValueError as e:
                self.output_fn(str(e))

    def collect(self, defaults: Dict[str, Any], retailers: Mapping[str, str], need_item: bool) -> Dict[str, str]:
        d = prompt_defaults(defaults)
        answers = {
            "phone": self._ask("Phone number to receive text alerts", d["phone"]),
            "sid": self._ask("Twilio SID", d["sid"]),
            "token": self._ask("Twilio Token", d["token"]),
            "number": self._ask("Twilio phone number to send from", d["number"]),
        }
        if need_item:
            keys = ", ".join(retailers.keys())
            answers["item_name"] = self._ask("Item name for stock watching", d["item_name"])
            answers["item_type"] = self._ask(
                f"Item retailer name [{keys}]",
                d["item_type"],
                validate=lambda v: normalize_retailer(v, retailers),
            )
            answers["item_url"] = self._ask("Item URL", d["item_url"])
        return answers


ENV_KEYS = {
    "phone": "STOCKWATCH_PHONE",
    "sid": "TWILIO_ACCOUNT_SID",
    "token": "TWILIO_AUTH_TOKEN",
    "number": "TWILIO_FROM_NUMBER",
    "item_name": "STOCKWATCH_ITEM_NAME",
    "item_type": "STOCKWATCH_ITEM_TYPE",
    "item_url": "STOCKWATCH_ITEM_URL",
}


class EnvironmentProvider:
    """Non-interactive provider for unattended deployments."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def collect(self, defaults: Dict[str, Any], retailers: Mapping[str, str], need_item: bool) -> Dict[str, str]:
        d = prompt_defaults(defaults)
        wanted = ["phone", "sid", "token", "number"]
        if need_item:
            wanted += ["item_name", "item_type", "item_url"]

        answers: Dict[str, str] = {}
        missing = []
        for key in wanted:
            value = (self.environ.get(ENV_KEYS[key]) or "").strip() or d[key]
            if not value:
                missing.append(ENV_KEYS[key])
            answers[key] = value
        if missing:
            raise SettingsError("Missing environment variables: " + ", ".join(missing))

        if need_item:
            try:
                answers["item_type"] = normalize_retailer(answers["item_type"], retailers)
            except ValueError as e:
                raise SettingsError(str(e)) from e
        return answers


def get_provider(name: str) -> ConfigurationProvider:
    if name == "env":
        return EnvironmentProvider()
    if name == "interactive":
        return InteractiveWizard()
    raise SettingsError(f"Unknown configuration provider: {name!r} (use 'interactive' or 'env')")
