"""Tests for data models."""

import pytest
from pydantic import ValidationError

from stockwatch import config
from stockwatch.models import Settings, TwilioCredentials, WatchedItem


def _complete_settings(**overrides) -> dict:
    data = {
        "phone": "+15550001111",
        "twilio": {"sid": "AC123", "token": "secret", "number": "+15550002222"},
        "items": [{"name": "Widget", "type": "acme", "url": "https://x/y"}],
    }
    data.update(overrides)
    return data


class TestWatchedItem:
    """Tests for the WatchedItem model."""

    def test_in_stock_defaults_to_false(self) -> None:
        """Items from a hand-edited file usually omit inStock."""
        item = WatchedItem.model_validate({"name": "Widget", "type": "acme", "url": "https://x/y"})
        assert item.in_stock is False

    def test_reads_camel_case_in_stock(self) -> None:
        item = WatchedItem.model_validate(
            {"name": "Widget", "type": "acme", "url": "https://x/y", "inStock": True}
        )
        assert item.in_stock is True

    def test_accepts_field_name(self) -> None:
        item = WatchedItem(name="Widget", type="acme", url="https://x/y", in_stock=True)
        assert item.in_stock is True

    def test_url_is_required(self) -> None:
        with pytest.raises(ValidationError):
            WatchedItem.model_validate({"name": "Widget", "type": "acme"})

    def test_str(self) -> None:
        item = WatchedItem(name="Widget", type="acme", url="https://x/y")
        assert str(item) == "Widget (acme): watching"


class TestSettings:
    """Tests for the Settings model."""

    def test_complete_settings(self) -> None:
        settings = Settings.model_validate(_complete_settings())
        assert settings.is_complete
        assert settings.twilio == TwilioCredentials(sid="AC123", token="secret", number="+15550002222")

    @pytest.mark.parametrize("overrides", [
        {"phone": ""},
        {"twilio": {"sid": "", "token": "secret", "number": "+15550002222"}},
        {"twilio": {"sid": "AC123", "token": "", "number": "+15550002222"}},
        {"twilio": {"sid": "AC123", "token": "secret"}},
        {"items": []},
    ])
    def test_incomplete_settings(self, overrides: dict) -> None:
        """Any missing required field makes the settings unusable."""
        assert not Settings.model_validate(_complete_settings(**overrides)).is_complete

    def test_empty_settings(self) -> None:
        settings = Settings()
        assert not settings.is_complete
        assert settings.items == []

    def test_default_poll_interval(self) -> None:
        settings = Settings.model_validate(_complete_settings())
        assert settings.poll_interval_ms == config.DEFAULT_INTERVAL_MS == 120000

    def test_custom_poll_interval(self) -> None:
        settings = Settings.model_validate(_complete_settings(interval=30000))
        assert settings.poll_interval_ms == 30000

    def test_zero_interval_falls_back_to_default(self) -> None:
        settings = Settings.model_validate(_complete_settings(interval=0))
        assert settings.poll_interval_ms == 120000

    def test_to_json_dict_uses_file_keys(self) -> None:
        settings = Settings.model_validate(_complete_settings())
        settings.items[0].in_stock = True

        data = settings.to_json_dict()

        assert data["items"][0]["inStock"] is True
        assert "in_stock" not in data["items"][0]
        assert data["twilio"] == {"sid": "AC123", "token": "secret", "number": "+15550002222"}
        # Unset interval is left out rather than written as null
        assert "interval" not in data

    def test_unknown_keys_survive_dump(self) -> None:
        """Keys the models don't know about are written back unchanged."""
        data = _complete_settings(
            notes="check weekly",
            twilio={"sid": "AC123", "token": "secret", "number": "+15550002222", "region": "us1"},
            items=[{"name": "Widget", "type": "acme", "url": "https://x/y", "maxPrice": 499}],
        )

        dumped = Settings.model_validate(data).to_json_dict()

        assert dumped["notes"] == "check weekly"
        assert dumped["twilio"]["region"] == "us1"
        assert dumped["items"][0]["maxPrice"] == 499
        assert dumped["items"][0]["inStock"] is False
