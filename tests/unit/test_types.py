"""
Unit tests for domain types.
"""

import pytest
from decimal import Decimal

from mine_usage.domain.errors import ErrorCode, ParseError
from mine_usage.domain.types import Site, UsageRecord, check_date, to_amount


class TestToAmount:
    """Tests for amount conversion."""

    def test_integer(self):
        assert to_amount(5000) == Decimal("5000.00")

    def test_float_rounds_to_cents(self):
        assert to_amount(1.005) == Decimal("1.01")
        assert to_amount(0.1) == Decimal("0.10")

    def test_string_with_whitespace(self):
        assert to_amount(" 12.5 ") == Decimal("12.50")

    def test_negative_zero_is_normalized(self):
        assert str(to_amount("-0.001")) == "0.00"

    @pytest.mark.parametrize("value", ["abc", "", "nan", "inf", float("nan"), True])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValueError):
            to_amount(value)


class TestCheckDate:
    """Tests for date validation."""

    def test_accepts_free_text(self):
        assert check_date("2024-01-01") is None
        assert check_date("sometime in March") is None

    @pytest.mark.parametrize("value", ["", "   ", "2024,01,01", "2024-01-01\n", "2024\udcff"])
    def test_rejects_unstorable(self, value):
        assert check_date(value) is not None


class TestUsageRecord:
    """Tests for UsageRecord value object."""

    def test_serialize(self):
        record = UsageRecord("2024-01-01", 5000, 10.5)
        assert record.serialize() == "2024-01-01,5000.00,10.50"

    def test_deserialize(self):
        record = UsageRecord.deserialize("2024-02-01,1500.25,5.00")
        assert record.date == "2024-02-01"
        assert record.water_usage == Decimal("1500.25")
        assert record.land_usage == Decimal("5.00")

    def test_round_trip(self):
        record = UsageRecord("2024-03-15", 123.456, 7.891)
        assert UsageRecord.deserialize(record.serialize()) == record

    def test_describe(self):
        record = UsageRecord("2024-01-01", 5000, 10)
        assert record.describe() == (
            "Date: 2024-01-01, Water used: 5000.00 acre-feet, Land used: 10.00 acres"
        )

    def test_immutability(self):
        record = UsageRecord("2024-01-01", 1, 1)
        with pytest.raises(AttributeError):
            record.water_usage = Decimal("2")

    @pytest.mark.parametrize("line", [
        "2024-01-01,5000.00",
        "2024-01-01",
        "2024-01-01,abc,1.00",
        "2024-01-01,1.00,",
        "2024-01-01,-5.00,1.00",
        ",5.00,1.00",
        "2024-01-01,5.00,1.00,extra",
    ])
    def test_deserialize_rejects_malformed(self, line):
        with pytest.raises(ParseError):
            UsageRecord.deserialize(line)


class TestSiteAddUsage:
    """Tests for the water limit rule."""

    def test_empty_site(self):
        site = Site("Sierrita", 27180)
        assert site.total_water_used() == Decimal("0")
        assert site.water_remaining() == Decimal("27180.00")

    def test_accepts_within_limit(self):
        site = Site("Rosemont", 6000)
        result = site.add_usage(5000, 10, "2024-01-01")

        assert result.is_ok
        assert result.value == UsageRecord("2024-01-01", 5000, 10)
        assert site.water_remaining() == Decimal("1000.00")

    def test_exact_remaining_is_accepted(self):
        site = Site("Rosemont", 6000)
        site.add_usage(5000, 10, "2024-01-01")

        result = site.add_usage(1000, 0, "2024-02-01")

        assert result.is_ok
        assert site.water_remaining() == Decimal("0.00")

    def test_over_limit_is_rejected_without_change(self):
        site = Site("Rosemont", 6000)
        site.add_usage(5000, 10, "2024-01-01")

        result = site.add_usage(1500, 5, "2024-02-01")

        assert result.is_err
        assert result.error.code == ErrorCode.LIMIT_EXCEEDED
        assert result.error.context["remaining"] == "1000.00"
        assert len(site.records) == 1
        assert site.water_remaining() == Decimal("1000.00")

    def test_limit_is_checked_after_rounding_to_cents(self):
        site = Site("Rosemont", 6000)
        site.add_usage(5000, 10, "2024-01-01")

        over = site.add_usage(Decimal("1000.005"), 0, "2024-02-01")
        assert over.error.code == ErrorCode.LIMIT_EXCEEDED
        assert over.error.context["requested"] == "1000.01"

        within = site.add_usage(Decimal("1000.004"), 0, "2024-02-01")
        assert within.is_ok
        assert within.value.water_usage == Decimal("1000.00")
        assert site.water_remaining() == Decimal("0.00")

    def test_cent_amounts_sum_exactly(self):
        site = Site("Mission", Decimal("0.30"))
        assert site.add_usage(0.1, 0, "a").is_ok
        assert site.add_usage(0.2, 0, "b").is_ok
        assert site.water_remaining() == Decimal("0.00")

    def test_total_is_sum_of_accepted(self):
        site = Site("Mission", 12590)
        amounts = [4000, 5000, 4000, 3000, 590]
        accepted = [a for a in amounts if site.add_usage(a, 1, "2024").is_ok]

        assert accepted == [4000, 5000, 3000, 590]
        assert site.total_water_used() == sum(Decimal(a) for a in accepted)
        assert site.total_water_used() <= site.water_limit

    @pytest.mark.parametrize("water,land,date", [
        (-1, 0, "2024-01-01"),
        (1, -1, "2024-01-01"),
        (float("nan"), 0, "2024-01-01"),
        (1, 0, "2024,01,01"),
        (1, 0, ""),
        (1, 0, "2024\udcff"),
    ])
    def test_invalid_input_is_rejected(self, water, land, date):
        site = Site("Rosemont", 6000)
        result = site.add_usage(water, land, date)

        assert result.is_err
        assert result.error.code == ErrorCode.INVALID
        assert site.records == []

    def test_land_is_not_limited(self):
        site = Site("Rosemont", 6000)
        assert site.add_usage(0, 1_000_000, "2024-01-01").is_ok
        assert site.total_land_used() == Decimal("1000000.00")


class TestSiteSerialization:
    """Tests for Site line format."""

    def test_serialize_all(self):
        site = Site("Rosemont", 6000)
        site.add_usage(5000, 10, "2024-01-01")
        site.add_usage(250.5, 1.25, "2024-01-15")

        assert site.serialize_all() == [
            "Rosemont,2024-01-01,5000.00,10.00",
            "Rosemont,2024-01-15,250.50,1.25",
        ]

    def test_from_lines(self):
        lines = ["Rosemont,2024-01-15,250.50,1.25", "Rosemont,2024-01-01,5000.00,10.00"]
        site = Site.from_lines(lines, 6000)

        assert site.name == "Rosemont"
        assert site.water_limit == Decimal("6000.00")
        assert [r.date for r in site.records] == ["2024-01-15", "2024-01-01"]
        assert site.total_water_used() == Decimal("5250.50")

    def test_from_lines_rejects_mixed_names(self):
        lines = ["Rosemont,2024-01-01,1.00,1.00", "Mission,2024-01-01,1.00,1.00"]
        with pytest.raises(ParseError):
            Site.from_lines(lines, 6000)

    def test_from_lines_reports_line_number(self):
        lines = ["Rosemont,2024-01-01,1.00,1.00", "Rosemont,2024-01-02,oops,1.00"]
        with pytest.raises(ParseError) as exc_info:
            Site.from_lines(lines, 6000, line_numbers=[3, 7])

        assert exc_info.value.line_number == 7
        assert "line 7" in str(exc_info.value)

    def test_from_lines_requires_lines(self):
        with pytest.raises(ParseError):
            Site.from_lines([], 6000)

    def test_discard_last(self):
        site = Site("Rosemont", 6000)
        site.add_usage(1, 1, "a")
        site.add_usage(2, 2, "b")

        removed = site.discard_last()

        assert removed.date == "b"
        assert site.total_water_used() == Decimal("1.00")


class TestSiteReport:
    """Tests for report formatting."""

    def test_report_lines(self):
        site = Site("Rosemont", 6000)
        site.add_usage(5000, 10, "2024-01-01")

        report = site.format_report()

        assert report.lines() == [
            "Date: 2024-01-01, Water used: 5000.00 acre-feet, Land used: 10.00 acres",
            "Total water used: 5000.00 acre-feet, Water remaining: 1000.00 acre-feet",
        ]

    def test_empty_report(self):
        report = Site("Sierrita", 27180).format_report()

        assert report.records == ()
        assert report.water_remaining == Decimal("27180.00")
        assert report.lines() == [
            "Total water used: 0.00 acre-feet, Water remaining: 27180.00 acre-feet"
        ]

    def test_report_is_a_snapshot(self):
        site = Site("Rosemont", 6000)
        report = site.format_report()
        site.add_usage(1, 1, "2024-01-01")

        assert report.records == ()

    def test_summarize(self):
        site = Site("Rosemont", 6000)
        site.add_usage(4500, 3, "2024-01-01")

        summary = site.summarize()

        assert summary.record_count == 1
        assert summary.land_used == Decimal("3.00")
        assert summary.percent_used == pytest.approx(75.0)
