"""Period data sources for the chart loader.

A source has one coroutine, ``fetch(period)``, that either returns rows
(mappings with ``income`` and ``expenses``, optionally ``date``/``month``)
or raises.
"""

import asyncio
from typing import Callable, Iterable, List, Mapping, Optional, Protocol, Sequence

import httpx

from spendwise.domain import Entry, Period
from spendwise.errors import AggregationSourceUnavailable
from spendwise.log import get_logger
from spendwise.periods import aggregate, as_period, windows

log = get_logger(__name__)

ENDPOINTS = {
    Period.DAILY: "/api/transactions/daily",
    Period.WEEKLY: "/api/transactions/weekly",
    Period.MONTHLY: "/api/transactions/monthly",
}


class PeriodSource(Protocol):
    async def fetch(self, period: Period) -> Sequence[Mapping]:
        ...


class EntryPeriodSource:
    """Serves period rows computed from the current entry snapshot."""

    def __init__(self, snapshot: Callable[[], Iterable[Entry]], today=None):
        self._snapshot = snapshot
        self._today = today

    async def fetch(self, period: Period) -> List[dict]:
        period = as_period(period)
        buckets = aggregate(self._snapshot(), period, self._today)
        await asyncio.sleep(0)  # cooperate

        date_field = {Period.DAILY: "date", Period.MONTHLY: "month"}.get(period)
        rows = []
        for w, b in zip(windows(period, self._today), buckets):
            row = {"income": str(b.income), "expenses": str(b.expenses)}
            if date_field:
                row[date_field] = w.start.isoformat()
            rows.append(row)
        return rows


class HttpPeriodSource:
    """Fetches ``/api/transactions/<period>`` from the SpendWise backend.

    The backend answers ``{"success": true, "data": [...]}``. Anything else,
    including transport errors and non-2xx responses, raises
    :class:`AggregationSourceUnavailable`.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def fetch(self, period: Period) -> list:
        period = as_period(period)
        url = f"{self.base_url}{ENDPOINTS[period]}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(url, headers=self._headers())
                resp.raise_for_status()
                result = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            log.warning("period_fetch_failed", period=period.value, url=url, error=str(e))
            raise AggregationSourceUnavailable(period, cause=e) from e

        if not isinstance(result, dict) or not result.get("success"):
            message = result.get("message", "") if isinstance(result, dict) else "malformed payload"
            log.warning("period_fetch_rejected", period=period.value, message=message)
            raise AggregationSourceUnavailable(period, message=message or "request not successful")

        data = result.get("data")
        if not isinstance(data, list):
            raise AggregationSourceUnavailable(period, message="missing data list")
        return data
