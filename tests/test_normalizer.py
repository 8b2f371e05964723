"""Tests for payload normalization and alias resolution."""

from __future__ import annotations

from datetime import date

import pytest

from stockresearch.models.records import AnalystEstimate, DividendEvent, FinancialPeriodRecord
from stockresearch.normalize import (
    RecordKind,
    SchemaHints,
    extract_rows,
    first_row,
    normalize,
    normalize_all,
    parse_date,
    resolve_field,
    to_number,
    year_of,
)
from stockresearch.normalize.aliases import FieldAliases
from stockresearch.providers.base import Provider

FMP_INCOME = SchemaHints(RecordKind.INCOME, Provider.FMP)
FINNHUB_XBRL = SchemaHints(RecordKind.INCOME, Provider.FINNHUB)


class TestScalars:
    @pytest.mark.parametrize(
        "raw,expected",
        [(1, 1.0), ("2.5", 2.5), ("1,234.5", 1234.5), (0, 0.0), ("n/a", None), (True, None)],
    )
    def test_to_number(self, raw, expected):
        assert to_number(raw) == expected

    def test_nan_is_absent(self):
        assert to_number(float("nan")) is None

    def test_parse_date_formats(self):
        assert parse_date("2024-03-15") == date(2024, 3, 15)
        assert parse_date("2024-03-15 00:00:00") == date(2024, 3, 15)
        assert parse_date("03/15/2024") == date(2024, 3, 15)
        assert parse_date("2024-02-30") is None
        assert parse_date(None) is None

    def test_year_of(self):
        assert year_of("FY2025") == 2025
        assert year_of(2024) == 2024
        assert year_of("12345") is None


class TestAliasResolution:
    def test_first_present_alias_wins(self):
        aliases = FieldAliases(("revenues", "revenue"))
        assert resolve_field({"revenues": 10, "revenue": 20}, aliases) == 10.0

    def test_non_numeric_alias_falls_through(self):
        aliases = FieldAliases(("revenues", "revenue"))
        assert resolve_field({"revenues": None, "revenue": 20}, aliases) == 20.0

    def test_reported_zero_is_kept(self):
        assert resolve_field({"eps": 0}, FieldAliases(("eps",))) == 0.0


class TestEnvelopes:
    def test_extract_rows_from_list_or_key(self):
        assert extract_rows([{"a": 1}, "junk"]) == [{"a": 1}]
        assert extract_rows({"data": [{"a": 1}]}, "data") == [{"a": 1}]
        assert extract_rows({"other": 1}, "data") == []

    def test_first_row(self):
        assert first_row([{"a": 1}, {"a": 2}]) == {"a": 1}
        assert first_row({"a": 1}) == {"a": 1}
        assert first_row({}) is None


class TestIncomeRecords:
    def test_fmp_statement(self):
        record = normalize(
            {"date": "2024-09-28", "revenue": 391e9, "costOfRevenue": 210e9, "epsdiluted": 6.08},
            FMP_INCOME,
        )
        assert isinstance(record, FinancialPeriodRecord)
        assert record.period_end_date == date(2024, 9, 28)
        assert record.revenue == 391e9
        assert record.eps == 6.08
        assert record.net_income is None
        assert record.source == "FMP"

    def test_xbrl_concept_then_label(self):
        raw = {
            "endDate": "2023-12-31",
            "report": {
                "ic": [
                    {"concept": "us-gaap_RevenueFromContractWithCustomerExcludingAssessedTax",
                     "label": "Revenues", "value": 500},
                    {"concept": "custom_Costs", "label": "Cost of Goods Sold", "value": "300"},
                    {"concept": "us-gaap_NetIncomeLoss", "label": "Net income", "value": 50},
                ]
            },
        }
        record = normalize(raw, FINNHUB_XBRL)
        assert record.revenue == 500.0
        assert record.cost_of_revenue == 300.0
        assert record.net_income == 50.0
        assert record.source == "Finnhub"

    def test_row_without_date_is_dropped(self):
        assert normalize({"revenue": 1}, FMP_INCOME) is None

    def test_duplicates_keep_first(self):
        rows = [
            {"date": "2024-12-31", "eps": 1.0},
            {"date": "2024-12-31", "eps": 2.0},
            {"date": "2023-12-31", "eps": 0.5},
        ]
        records = normalize_all(rows, FMP_INCOME)
        assert [r.eps for r in records] == [1.0, 0.5]


class TestDividendRecords:
    @pytest.mark.parametrize(
        "provider,row",
        [
            (Provider.FMP, {"date": "2024-05-10", "dividend": 0.25}),
            (Provider.FINNHUB, {"exDate": "2024-05-10", "amount": 0.25}),
            (Provider.ALPHA_VANTAGE, {"ex_dividend_date": "2024-05-10", "amount": "0.25"}),
        ],
    )
    def test_each_provider_shape(self, provider, row):
        event = normalize(row, SchemaHints(RecordKind.DIVIDEND, provider))
        assert isinstance(event, DividendEvent)
        assert event.ex_date == date(2024, 5, 10)
        assert event.amount_per_share == 0.25
        assert event.adjusted_amount == 0.25

    def test_non_positive_amount_is_dropped(self):
        hints = SchemaHints(RecordKind.DIVIDEND, Provider.FMP)
        assert normalize({"date": "2024-05-10", "dividend": 0}, hints) is None

    def test_same_day_different_amounts_both_kept(self):
        hints = SchemaHints(RecordKind.DIVIDEND, Provider.FMP)
        rows = [
            {"date": "2024-05-10", "dividend": 0.25},
            {"date": "2024-05-10", "dividend": 1.0},
            {"date": "2024-05-10", "dividend": 0.25},
        ]
        assert len(normalize_all(rows, hints)) == 2


def test_estimate_requires_fiscal_year():
    hints = SchemaHints(RecordKind.ESTIMATE, Provider.FMP)
    estimate = normalize({"date": "2026-09-30", "epsAvg": 8.1, "revenueAvg": 450e9}, hints)
    assert estimate == AnalystEstimate(2026, date(2026, 9, 30), 8.1, 450e9)
    assert normalize({"epsAvg": 8.1}, hints) is None


def test_unregistered_schema_raises():
    with pytest.raises(ValueError):
        normalize({"date": "2024-01-01"}, SchemaHints(RecordKind.INCOME, Provider.CNN))
