"""Tests for the schema package: models, formatting, and the config loader."""

import math

import pytest
import yaml

from src.schema.design_system import (
    display_text,
    format_currency,
    format_date,
    format_grouped,
    tier_for_rank,
)
from src.schema.loader import load_config, save_config
from src.schema.models import (
    DEFAULT_API_URL,
    AffiliateRecord,
    DesignSystem,
    QueryConfig,
    SortOrder,
    SortState,
    Tier,
    canonical_name,
)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class TestAffiliateRecord:
    def test_get_by_attribute_and_camel_case(self):
        rec = AffiliateRecord(code="A", total_wagered=12)
        assert rec.get("total_wagered") == 12
        assert rec.get("totalWagered") == 12

    def test_get_extra(self):
        rec = AffiliateRecord(extra={"region": "EU"})
        assert rec.get("region") == "EU"
        assert rec.get("missing") is None
        assert rec.get("missing", 0) == 0

    def test_canonical_name(self):
        assert canonical_name("usersRegistered") == "users_registered"
        assert canonical_name("users_registered") == "users_registered"
        assert canonical_name("region") is None


class TestSortState:
    def test_defaults(self):
        state = SortState()
        assert state.field == "total_wagered"
        assert state.order is SortOrder.DESC

    def test_toggle(self):
        assert SortOrder.ASC.toggled() is SortOrder.DESC
        assert SortOrder.DESC.toggled() is SortOrder.ASC

    def test_dict_round_trip(self):
        state = SortState("code", SortOrder.ASC)
        assert SortState.from_dict(state.to_dict()) == state


class TestQueryConfig:
    def test_defaults(self):
        config = QueryConfig()
        assert config.affiliate_code == "Colby"
        assert config.date_start == "2025-10-01"
        assert config.date_end == "2025-10-31"
        assert config.api_url == DEFAULT_API_URL

    def test_codes_split(self):
        assert QueryConfig(affiliate_code="A, B,,C").codes == ["A", "B", "C"]

    def test_credential_not_serialized(self):
        d = QueryConfig(credential="secret").to_dict()
        assert "credential" not in d
        assert "secret" not in d.values()

    def test_from_dict_partial(self):
        config = QueryConfig.from_dict({"affiliate_code": "Zed"})
        assert config.affiliate_code == "Zed"
        assert config.timeout_seconds == 30.0


class TestDesignSystem:
    def test_tier_colors(self):
        design = DesignSystem()
        assert design.tier_color(Tier.GOLD) == design.gold
        assert design.tier_color(Tier.NONE) is None


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

class TestFormatCurrency:
    def test_fraction_trimmed(self):
        assert format_currency(1234.5) == "$1,234.5"

    def test_whole_dollars(self):
        assert format_currency(1000) == "$1,000"

    def test_two_digits(self):
        assert format_currency(1234.56) == "$1,234.56"

    def test_rounds_to_cents(self):
        assert format_currency(1234.567) == "$1,234.57"

    def test_zero(self):
        assert format_currency(0) == "$0"

    def test_negative(self):
        assert format_currency(-12.5) == "-$12.5"

    def test_nan(self):
        assert format_currency(float("nan")) == "N/A"

    def test_integer_beyond_float_range(self):
        value = 10 ** 400
        text = format_currency(value)
        assert text.startswith("$10,000,")
        assert text.replace("$", "").replace(",", "") == str(value)

    def test_negative_large_integer(self):
        assert format_currency(-(10 ** 20)) == "-$100,000,000,000,000,000,000"


class TestFormatGrouped:
    def test_grouping(self):
        assert format_grouped(12345) == "12,345"

    def test_fraction(self):
        assert format_grouped(1234.5) == "1,234.5"

    def test_small(self):
        assert format_grouped(7) == "7"

    def test_none(self):
        assert format_grouped(None) == "N/A"

    def test_integer_beyond_float_range(self):
        assert format_grouped(10 ** 400).replace(",", "") == str(10 ** 400)


class TestFormatDate:
    def test_iso_date(self):
        assert format_date("2025-10-15") == "10/15/2025"

    def test_iso_datetime(self):
        assert format_date("2025-10-05T14:30:00Z") == "10/5/2025"

    def test_epoch_millis(self):
        assert format_date(0) == "1/1/1970"

    @pytest.mark.parametrize("value", [None, "", "not a date", {"d": 1},
                                       float("nan"), True])
    def test_unknown(self, value):
        assert format_date(value) == "Unknown"


class TestDisplayText:
    def test_plain_text_unchanged(self):
        assert display_text("Colby") == "Colby"

    def test_control_characters_dropped(self):
        assert display_text("Col\x01by\x00\x1f") == "Colby"

    def test_xml_whitespace_kept(self):
        assert display_text(" a\tb\nc\r ") == " a\tb\nc\r "

    def test_surrogates_and_noncharacters_dropped(self):
        assert display_text("a\ud800b\uffffc\ufffe") == "abc"

    def test_non_ascii_kept(self):
        assert display_text("Zoë 🎰") == "Zoë 🎰"

    def test_non_string(self):
        assert display_text(42) == "42"


class TestTierForRank:
    def test_podium(self):
        assert [tier_for_rank(r).value for r in range(1, 6)] == [
            "gold", "silver", "bronze", "", ""]


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

class TestConfigLoader:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "config.yaml"
        config = QueryConfig(affiliate_code="A,B", date_start="2025-09-01",
                             date_end="2025-09-30", timeout_seconds=5.0)
        save_config(config, path)
        assert load_config(path) == config

    def test_credential_not_written(self, tmp_path):
        path = tmp_path / "config.yaml"
        save_config(QueryConfig(credential="secret"), path)
        assert "secret" not in path.read_text()

    def test_yaml_is_readable(self, tmp_path):
        path = tmp_path / "config.yaml"
        save_config(QueryConfig(), path)
        data = yaml.safe_load(path.read_text())
        assert data["affiliate_code"] == "Colby"

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == QueryConfig()

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_config(path)
