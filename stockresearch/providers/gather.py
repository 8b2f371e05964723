"""Fan-out coordinator: run a batch of provider calls concurrently."""

from __future__ import annotations

import asyncio
from typing import Sequence

from stockresearch.providers.base import ProviderCall, ProviderResult
from stockresearch.providers.client import ProviderClient


async def gather(client: ProviderClient, calls: Sequence[ProviderCall]) -> list[ProviderResult]:
    """Issue every call at once and wait for all of them to settle.

    The result list is positional: ``results[i]`` answers ``calls[i]``.
    Upstream failures come back as ``ProviderFailure`` values; only an
    exception escaping ``fetch`` itself (a defect) propagates.
    """
    if not calls:
        return []
    return list(
        await asyncio.gather(
            *(
                client.fetch(call.provider, call.endpoint, call.params, call.timeout_ms)
                for call in calls
            )
        )
    )
