"""Insider transactions and institutional ownership from Finnhub.

Both calls run together; either one succeeding is enough for a response,
the other list is then empty and its failure is logged.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from stockresearch.normalize import extract_rows, resolve_fields
from stockresearch.normalize import aliases
from stockresearch.providers import endpoints
from stockresearch.providers.base import ProviderOk
from stockresearch.providers.client import ProviderClient
from stockresearch.providers.gather import gather
from stockresearch.schemas.activity import InsiderActivity
from stockresearch.services.assembler import (
    assemble,
    collect_failures,
    describe_failure,
    payload_of,
)

logger = logging.getLogger("stockresearch.services.insider")


def text(row: Mapping[str, Any], key: str) -> str | None:
    value = row.get(key)
    return value if isinstance(value, str) and value else None


def transaction_rows(payload: Any) -> list[dict]:
    """Most recent transaction first."""
    rows = [
        {
            "name": text(row, "name"),
            **resolve_fields(row, aliases.FINNHUB_INSIDER_TRANSACTION),
            "transaction_code": text(row, "transactionCode"),
            "transaction_date": text(row, "transactionDate"),
            "filing_date": text(row, "filingDate"),
        }
        for row in extract_rows(payload, "data")
    ]
    return sorted(rows, key=lambda r: r["transaction_date"] or "", reverse=True)


def ownership_rows(payload: Any) -> list[dict]:
    """Largest holder first."""
    rows = [
        {
            "name": text(row, "name"),
            **resolve_fields(row, aliases.FINNHUB_OWNERSHIP),
            "filing_date": text(row, "filingDate"),
        }
        for row in extract_rows(payload, "ownership", "data")
    ]
    return sorted(rows, key=lambda r: r["share"] or 0, reverse=True)


async def get_insider_activity(client: ProviderClient, symbol: str) -> InsiderActivity:
    results = await gather(
        client,
        [endpoints.finnhub_insider_transactions(symbol), endpoints.finnhub_ownership(symbol)],
    )
    transactions, ownership = (payload_of(r) for r in results)
    failures = collect_failures(results)
    for failure in failures:
        logger.info("insider symbol=%s partial: %s", symbol, describe_failure(failure))

    return assemble(
        InsiderActivity,
        {
            "symbol": symbol,
            "transactions": transaction_rows(transactions),
            "ownership": ownership_rows(ownership),
        },
        {},
        failures,
        usable=any(isinstance(r, ProviderOk) for r in results),
        error="Failed to fetch data from Finnhub",
    )
