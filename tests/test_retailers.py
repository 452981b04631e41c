"""Tests for the retailer selector table."""

import pytest

from stockwatch.retailers import load_retailers, normalize_retailer, selector_for


class TestRetailerTable:
    """Tests for loading and querying the bundled table."""

    def test_bundled_table_loads(self) -> None:
        retailers = load_retailers()
        assert "bestbuy" in retailers
        assert all(isinstance(v, str) and v for v in retailers.values())

    def test_table_is_read_only(self) -> None:
        retailers = load_retailers()
        with pytest.raises(TypeError):
            retailers["newshop"] = "#buy"

    def test_table_is_loaded_once(self) -> None:
        assert load_retailers() is load_retailers()

    def test_selector_for_known_retailer(self) -> None:
        assert selector_for("acme", {"acme": "#buy-button"}) == "#buy-button"

    def test_selector_for_is_case_insensitive(self) -> None:
        assert selector_for("ACME ", {"acme": "#buy-button"}) == "#buy-button"

    def test_selector_for_unknown_retailer(self) -> None:
        assert selector_for("nowhere", {"acme": "#buy-button"}) is None
        assert selector_for(None, {"acme": "#buy-button"}) is None


class TestNormalizeRetailer:
    """Tests for retailer id validation."""

    def test_lowercases_input(self) -> None:
        assert normalize_retailer("AcMe", {"acme": "#buy"}) == "acme"

    def test_rejects_unknown_with_valid_keys(self) -> None:
        with pytest.raises(ValueError) as exc:
            normalize_retailer("initech", {"acme": "#buy", "globex": ".cart"})
        assert str(exc.value) == "Retailer must be one of: acme, globex"
