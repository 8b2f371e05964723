"""Map heterogeneous provider payloads onto the canonical records.

Absent and unparseable values always come back as ``None``; a reported
zero is kept as ``0.0``.
"""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Union

from stockresearch.models.records import (
    AnalystEstimate,
    DividendEvent,
    FinancialPeriodRecord,
    PeriodType,
)
from stockresearch.normalize import aliases
from stockresearch.normalize.aliases import FieldAliases, RecordSchema
from stockresearch.providers.base import Provider

_ISO_DATE = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})")
_US_DATE = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})\s*$")
_YEAR = re.compile(r"(?<!\d)(\d{4})(?!\d)")

Record = Union[FinancialPeriodRecord, DividendEvent, AnalystEstimate]


class RecordKind(str, enum.Enum):
    INCOME = "income"
    DIVIDEND = "dividend"
    ESTIMATE = "estimate"


@dataclass(frozen=True)
class SchemaHints:
    kind: RecordKind
    provider: Provider
    period_type: PeriodType = PeriodType.ANNUAL


_SCHEMAS: dict[tuple[RecordKind, Provider], RecordSchema] = {
    (RecordKind.INCOME, Provider.FMP): aliases.FMP_INCOME,
    (RecordKind.INCOME, Provider.FINNHUB): aliases.FINNHUB_XBRL_INCOME,
    (RecordKind.DIVIDEND, Provider.FMP): aliases.FMP_DIVIDEND,
    (RecordKind.DIVIDEND, Provider.FINNHUB): aliases.FINNHUB_DIVIDEND,
    (RecordKind.DIVIDEND, Provider.ALPHA_VANTAGE): aliases.ALPHA_VANTAGE_DIVIDEND,
    (RecordKind.ESTIMATE, Provider.FMP): aliases.FMP_ESTIMATE,
    (RecordKind.ESTIMATE, Provider.FINNHUB): aliases.FINNHUB_ESTIMATE,
}


# ── Scalars ──────────────────────────────────────────────────────────────────


def to_number(value: Any) -> float | None:
    """Parse a provider value as float; non-numeric, NaN and bools are absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", ""))
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_date(value: Any) -> date | None:
    """Accept ``YYYY-MM-DD`` (optionally with a time part) or ``MM/DD/YYYY``."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    match = _ISO_DATE.match(value)
    try:
        if match:
            year, month, day = (int(g) for g in match.groups())
            return date(year, month, day)
        match = _US_DATE.match(value)
        if match:
            month, day, year = (int(g) for g in match.groups())
            return date(year, month, day)
    except ValueError:
        return None
    return None


def year_of(value: Any) -> int | None:
    """Calendar year from a date, an int, or the first 4-digit group of a string."""
    if isinstance(value, date):
        return value.year
    if isinstance(value, int) and not isinstance(value, bool):
        return value if 1000 <= value <= 9999 else None
    if isinstance(value, str):
        match = _YEAR.search(value)
        if match:
            return int(match.group(1))
    return None


# ── Field resolution ─────────────────────────────────────────────────────────


def resolve_field(item: Mapping[str, Any], field_aliases: FieldAliases) -> float | None:
    """First alias present with a numeric value wins."""
    for key in field_aliases.keys:
        if key in item:
            number = to_number(item[key])
            if number is not None:
                return number
    return None


def resolve_concept(lines: Iterable[Mapping[str, Any]], field_aliases: FieldAliases) -> float | None:
    """Resolve against XBRL line items: concepts in priority order, then labels."""
    lines = [line for line in lines if isinstance(line, Mapping)]
    for concept in field_aliases.keys:
        for line in lines:
            if line.get("concept") == concept:
                number = to_number(line.get("value"))
                if number is not None:
                    return number
    for label in field_aliases.labels:
        for line in lines:
            if label in str(line.get("label") or ""):
                number = to_number(line.get("value"))
                if number is not None:
                    return number
    return None


def resolve_fields(
    item: Mapping[str, Any] | None, table: Mapping[str, FieldAliases]
) -> dict[str, float | None]:
    """Resolve every canonical field of ``table``; a missing item yields all None."""
    if not isinstance(item, Mapping):
        return {name: None for name in table}
    return {name: resolve_field(item, field_aliases) for name, field_aliases in table.items()}


def _first_present(item: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = item.get(key)
        if value is not None and value != "":
            return value
    return None


def _dig(item: Mapping[str, Any], path: tuple[str, ...]) -> list:
    node: Any = item
    for key in path:
        if not isinstance(node, Mapping):
            return []
        node = node.get(key)
    return node if isinstance(node, list) else []


# ── Envelopes ────────────────────────────────────────────────────────────────


def extract_rows(payload: Any, *keys: str) -> list[Mapping[str, Any]]:
    """Rows from a bare list, or from the first listed key holding a list."""
    if isinstance(payload, list):
        return [row for row in payload if isinstance(row, Mapping)]
    if isinstance(payload, Mapping):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return [row for row in value if isinstance(row, Mapping)]
    return []


def first_row(payload: Any) -> Mapping[str, Any] | None:
    """FMP wraps single objects in a one-element list; Finnhub does not."""
    if isinstance(payload, list):
        return next((row for row in payload if isinstance(row, Mapping)), None)
    if isinstance(payload, Mapping) and payload:
        return payload
    return None


# ── Records ──────────────────────────────────────────────────────────────────


def schema_for(hints: SchemaHints) -> RecordSchema:
    try:
        return _SCHEMAS[(hints.kind, hints.provider)]
    except KeyError:
        raise ValueError(
            f"No {hints.kind.value} schema registered for {hints.provider.label}"
        ) from None


def normalize(raw: Any, hints: SchemaHints) -> Record | None:
    """Normalize one provider item, or return None when it has no usable date/value."""
    if not isinstance(raw, Mapping):
        return None
    schema = schema_for(hints)
    raw_date = _first_present(raw, schema.date_keys)

    if hints.kind is RecordKind.ESTIMATE:
        fiscal_year = year_of(raw_date)
        if fiscal_year is None:
            return None
        values = resolve_fields(raw, schema.fields)
        return AnalystEstimate(
            fiscal_year=fiscal_year,
            period_end_date=parse_date(raw_date),
            eps_avg=values["eps_avg"],
            revenue_avg=values["revenue_avg"],
        )

    when = parse_date(raw_date)
    if when is None:
        return None

    if hints.kind is RecordKind.DIVIDEND:
        values = resolve_fields(raw, schema.fields)
        amount = values["amount"]
        if amount is None or amount <= 0:
            return None
        adjusted = values["adjusted"]
        return DividendEvent(
            ex_date=when,
            amount_per_share=amount,
            adjusted_amount=adjusted if adjusted is not None else amount,
            source=hints.provider.label,
        )

    if schema.concept_lines:
        lines = _dig(raw, schema.concept_lines)
        values = {name: resolve_concept(lines, fa) for name, fa in schema.fields.items()}
    else:
        values = resolve_fields(raw, schema.fields)
    return FinancialPeriodRecord(
        period_end_date=when,
        period_type=hints.period_type,
        source=hints.provider.label,
        **values,
    )


def _dedupe_key(record: Record) -> Any:
    if isinstance(record, FinancialPeriodRecord):
        return record.period_end_date
    if isinstance(record, DividendEvent):
        return (record.ex_date, record.amount_per_share)
    return record.fiscal_year


def normalize_all(rows: Iterable[Any], hints: SchemaHints) -> list:
    """Normalize every row, drop unusable ones, keep the first of each duplicate."""
    seen: set = set()
    records = []
    for row in rows:
        record = normalize(row, hints)
        if record is None:
            continue
        key = _dedupe_key(record)
        if key in seen:
            continue
        seen.add(key)
        records.append(record)
    return records
