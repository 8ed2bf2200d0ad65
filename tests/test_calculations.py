"""
Tests for the calculation modules.
"""

import pytest

from flipcalc.calculations.parsing import (
    parse_amount,
    to_input_text,
    format_money,
    format_percent,
)
from flipcalc.calculations.rehab import (
    calculate_base_rehab,
    calculate_rehab_total,
    calculate_toggles_total,
    compute_total_from_record,
    default_items,
    merge_catalog_items,
    rate_for_scope,
    scope_label,
    toggle_breakdown,
)
from flipcalc.calculations.max_offer import LTV_TIERS, calculate_offer_tiers
from flipcalc.calculations.profit import calculate_loan_amount, calculate_profit


def reference_items():
    """HVAC at $5,000 flat and Roof at $8/sf, both included."""
    items = default_items()
    for item in items:
        if item["name"] == "HVAC":
            item["included"] = True
            item["cost"] = 5000
        if item["name"] == "Roof":
            item["included"] = True
            item["rate"] = 8
    return items


# =============================================================================
# Numeric parsing
# =============================================================================


class TestParseAmount:
    """Test free-form numeric input parsing."""

    def test_currency_text(self):
        """Test dollar signs and thousands separators are ignored."""
        assert parse_amount("$45,000.50") == 45000.50

    def test_non_numeric_is_zero(self):
        """Test text with no digits parses to 0."""
        assert parse_amount("abc") == 0
        assert parse_amount("") == 0
        assert parse_amount("-") == 0

    def test_none_is_zero(self):
        assert parse_amount(None) == 0

    def test_percent_sign(self):
        assert parse_amount("12%") == 12

    def test_negative(self):
        assert parse_amount("-2,500") == -2500

    def test_leading_number_wins(self):
        """Test half-typed input reads the leading decimal number."""
        assert parse_amount("1.2.3") == 1.2
        assert parse_amount(".5") == 0.5

    def test_numbers_pass_through(self):
        assert parse_amount(300000) == 300000
        assert parse_amount(12.5) == 12.5

    def test_non_finite_is_zero(self):
        """Test infinities and NaN never leak into calculations."""
        assert parse_amount(float("inf")) == 0
        assert parse_amount(float("nan")) == 0

    def test_booleans_are_zero(self):
        assert parse_amount(True) == 0


class TestFormatting:
    """Test display helpers."""

    def test_input_text_drops_trailing_zero(self):
        assert to_input_text(33000.0) == "33000"
        assert to_input_text(1234.25) == "1234.25"
        assert to_input_text(0.5) == "0.5"

    def test_input_text_of_garbage(self):
        assert to_input_text("abc") == "0"

    def test_format_money(self):
        assert format_money(1234.5) == "1,234.5"
        assert format_money(1000) == "1,000"
        assert format_money("$2,500.50") == "2,500.5"

    def test_format_money_negative_zero(self):
        assert format_money(-0.001) == "0"

    def test_format_percent(self):
        assert format_percent(0.1574) == "15.7%"
        assert format_percent(0) == "0.0%"


# =============================================================================
# Rehab
# =============================================================================


class TestRehabCalculations:
    """Test rehab totals."""

    def test_scope_rates(self):
        assert rate_for_scope("light") == 10
        assert rate_for_scope("mid") == 20
        assert rate_for_scope("gut") == 45

    def test_unknown_scope_priced_as_light(self):
        assert rate_for_scope("palace") == 10
        assert rate_for_scope(None) == 10
        assert rate_for_scope(["mid"]) == 10
        assert rate_for_scope(20) == 10

    def test_scope_labels(self):
        assert scope_label("gut") == "Gut Job ($45/sf)"
        assert scope_label({"scope": "mid"}) == "Light Rehab ($10/sf)"

    def test_reference_project(self):
        """Test 1,000 sf mid-tier with HVAC and Roof toggled on."""
        items = reference_items()
        assert calculate_base_rehab(1000, "mid") == 20000
        assert calculate_toggles_total(items, 1000) == 13000
        assert calculate_rehab_total(items, 1000, "mid") == 33000

    def test_untoggled_items_ignored(self):
        items = reference_items()
        for item in items:
            item["included"] = False
        assert calculate_rehab_total(items, 1000, "mid") == 20000

    def test_hvac_is_flat(self):
        """Test HVAC cost does not scale with square footage."""
        items = reference_items()
        assert calculate_toggles_total(items, 0) == 5000

    def test_rate_falls_back_to_cost(self):
        """Test old saves that stored $/sf under 'cost'."""
        items = [{"id": 1, "name": "Roof", "included": True, "cost": 8}]
        assert calculate_toggles_total(items, 1000) == 8000

    def test_breakdown_lists_positive_amounts(self):
        rows = toggle_breakdown(reference_items(), 1000)
        assert [row["name"] for row in rows] == ["Roof", "HVAC"]
        assert rows[0]["amount"] == 8000
        assert rows[0]["rate"] == 8
        assert "rate" not in rows[1]

    def test_breakdown_skips_zero_amounts(self):
        items = default_items()
        items[0]["included"] = True
        assert toggle_breakdown(items, 1000) == []


class TestComputeTotalFromRecord:
    """Test totals computed from stored rehab records."""

    def test_matches_live_total(self):
        items = reference_items()
        record = {"items": items, "meta": {"sf": 1000, "scope": "mid"}}
        assert compute_total_from_record(record) == calculate_rehab_total(
            items, 1000, "mid"
        )

    def test_missing_record(self):
        assert compute_total_from_record(None) == 0
        assert compute_total_from_record({}) == 0

    def test_missing_meta_and_bad_items(self):
        """Test records missing parts are read with defaults."""
        assert compute_total_from_record({"items": "nope"}) == 0
        record = {"items": [None, {"name": "HVAC", "included": True, "cost": 700}]}
        assert compute_total_from_record(record) == 700

    def test_malformed_record_and_meta(self):
        assert compute_total_from_record("garbage") == 0
        assert compute_total_from_record({"items": [], "meta": [1000]}) == 0
        record = {"items": [], "meta": {"sf": 100, "scope": ["gut"]}}
        assert compute_total_from_record(record) == 1000

    def test_string_values(self):
        record = {"items": [], "meta": {"sf": "1,500", "scope": "gut"}}
        assert compute_total_from_record(record) == 67500


class TestMergeCatalogItems:
    """Test stored line items are migrated onto the catalog."""

    def test_empty_gives_defaults(self):
        assert merge_catalog_items([]) == default_items()
        assert merge_catalog_items(None) == default_items()
        assert merge_catalog_items(5) == default_items()

    def test_missing_catalog_items_appended(self):
        merged = merge_catalog_items(
            [{"id": 1, "name": "Roof", "included": True, "rate": 4}]
        )
        assert [item["name"] for item in merged] == [
            "Roof", "Siding", "HVAC", "Rewiring", "Repiping", "Flooring"
        ]
        assert [item["id"] for item in merged] == [1, 2, 3, 4, 5, 6]
        assert merged[0]["included"] is True
        assert merged[0]["rate"] == 4

    def test_appended_ids_follow_highest(self):
        merged = merge_catalog_items([{"id": 10, "name": "Pool", "rate": 3}])
        assert merged[0]["name"] == "Pool"
        assert [item["id"] for item in merged[1:]] == [11, 12, 13, 14, 15, 16]

    def test_legacy_cost_becomes_rate(self):
        merged = merge_catalog_items([{"id": 1, "name": "Roof", "cost": 8}])
        assert merged[0]["rate"] == 8

    def test_hvac_keeps_cost(self):
        merged = merge_catalog_items([{"id": 3, "name": "HVAC", "cost": "4,500"}])
        assert merged[0]["cost"] == 4500
        assert merged[0]["rate"] == 0

    def test_missing_id_and_name(self):
        merged = merge_catalog_items([{"included": True}])
        assert merged[0]["id"] == 1
        assert merged[0]["name"] == "Item 1"


# =============================================================================
# Max offer
# =============================================================================


class TestMaxOffer:
    """Test LTV offer tiers."""

    def test_reference_offer(self):
        """Test ARV 300,000 with 50,000 rehab."""
        tiers = calculate_offer_tiers(300000, 50000)
        assert [t["ltv"] for t in tiers] == list(LTV_TIERS)
        assert tiers[0]["tier_amount"] == pytest.approx(240000)
        assert tiers[0]["offer_after_rehab"] == pytest.approx(190000)
        assert tiers[-1]["tier_amount"] == pytest.approx(195000)
        assert tiers[-1]["offer_after_rehab"] == pytest.approx(145000)

    def test_labels(self):
        labels = [t["label"] for t in calculate_offer_tiers(1, 0)]
        assert labels == ["80% LTV", "75% LTV", "70% LTV", "65% LTV"]

    def test_tiers_non_increasing(self):
        for arv in (1, 99999, 300000, 1250000.5):
            amounts = [t["tier_amount"] for t in calculate_offer_tiers(arv, 0)]
            assert amounts == sorted(amounts, reverse=True)

    def test_offers_not_clamped(self):
        """Test a rehab larger than the tier amount gives a negative offer."""
        tiers = calculate_offer_tiers(100000, 90000)
        assert tiers[-1]["offer_after_rehab"] == pytest.approx(-25000)


# =============================================================================
# Profit
# =============================================================================


def reference_deal(**overrides):
    inputs = dict(
        arv=350000,
        purchase=220000,
        rehab=45000,
        closing_buy_pct=2,
        closing_sell_pct=6,
        contingency_pct=10,
        carry_months=4,
        utilities_monthly=0,
        taxes_monthly=0,
        rate_apr=12,
        points_pct=2,
        ltv_pct=85,
        loan_amount_override=0,
        num_draws=0,
        draw_fee=0,
    )
    inputs.update(overrides)
    return calculate_profit(**inputs)


class TestProfit:
    """Test flip profit breakdown."""

    def test_reference_deal_costs(self):
        result = reference_deal()
        assert result.closing_buy_cost == pytest.approx(4400)
        assert result.closing_sell_cost == pytest.approx(21000)
        assert result.contingency_cost == pytest.approx(4500)
        assert result.base_costs == pytest.approx(294900)
        assert result.gross_profit == pytest.approx(55100)

    def test_reference_deal_financing(self):
        result = reference_deal()
        assert result.loan_amount == pytest.approx(187000)
        assert result.points_cost == pytest.approx(3740)
        assert result.monthly_interest == pytest.approx(1870)
        assert result.interest_cost == pytest.approx(7480)
        assert result.financing_and_carry == pytest.approx(11220)
        assert result.net_profit == pytest.approx(43880)

    def test_totals_and_margins(self):
        result = reference_deal()
        assert result.total_costs == pytest.approx(294900 + 11220)
        assert result.margin == pytest.approx(55100 / 350000)
        assert result.net_margin == pytest.approx(43880 / 350000)

    def test_carry_and_draws(self):
        result = reference_deal(utilities_monthly=200, taxes_monthly=300, num_draws=3, draw_fee=150)
        assert result.utilities_cost == pytest.approx(800)
        assert result.taxes_cost == pytest.approx(1200)
        assert result.draw_fees == pytest.approx(450)
        assert result.financing_and_carry == pytest.approx(11220 + 800 + 1200 + 450)
        # Gross profit excludes financing and carry
        assert result.gross_profit == pytest.approx(55100)

    def test_loan_override(self):
        result = reference_deal(loan_amount_override=100000)
        assert result.loan_amount == 100000
        assert result.points_cost == pytest.approx(2000)

    def test_zero_override_uses_ltv(self):
        assert calculate_loan_amount(220000, 85, 0) == pytest.approx(187000)
        assert calculate_loan_amount(220000, 85, -5) == pytest.approx(187000)

    def test_zero_arv_margins(self):
        result = reference_deal(arv=0)
        assert result.margin == 0
        assert result.net_margin == 0

    def test_to_dict(self):
        data = reference_deal().to_dict()
        assert data["net_profit"] == pytest.approx(43880)
        assert set(data) >= {"gross_profit", "total_costs", "margin"}
