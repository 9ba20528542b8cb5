import random
from datetime import date
from typing import Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from spendwise.domain import Bucket, ChartData, Period, Provenance
from spendwise.errors import AggregationSourceUnavailable
from spendwise.functional import Either, Left, Right
from spendwise.log import get_logger
from spendwise.periods import as_period, buckets_from_rows, synthesize_fallback
from spendwise.sources import PeriodSource

log = get_logger(__name__)

SERIES = {
    "all": ("income", "expenses", "balance"),
    "income": ("income",),
    "expenses": ("expenses",),
    "balance": ("balance",),
}


class PeriodChart:
    """Loads chart buckets for the selected period.

    Only the most recently *selected* period may update the chart: a slow
    response for an earlier selection is dropped when it resolves. Source
    failures never escape; they produce placeholder buckets marked as
    fallback.
    """

    def __init__(
        self,
        source: PeriodSource,
        period: Union[Period, str] = Period.MONTHLY,
        today: Optional[date] = None,
        rng: Optional[random.Random] = None,
    ):
        self.source = source
        self.selected = as_period(period)
        self.current: Optional[ChartData] = None
        self._today = today
        self._rng = rng or random.Random()

    async def load(self, period: Period) -> Either[AggregationSourceUnavailable, Tuple[Bucket, ...]]:
        try:
            rows = await self.source.fetch(period)
            return Right(buckets_from_rows(rows, period, self._today))
        except AggregationSourceUnavailable as e:
            return Left(e)
        except Exception as e:
            return Left(AggregationSourceUnavailable(period, cause=e))

    def _fallback(self, period: Period, err: AggregationSourceUnavailable) -> ChartData:
        log.warning("chart_fallback", period=period.value, error=str(err))
        return ChartData(
            period=period,
            buckets=synthesize_fallback(period, self._today, self._rng),
            provenance=Provenance.FALLBACK,
        )

    async def select(
        self,
        period: Union[Period, str],
        monthly_rows: Optional[Sequence[Mapping]] = None,
    ) -> Optional[ChartData]:
        """Switch to ``period`` and return its chart data.

        ``monthly_rows`` is data the caller already holds for the monthly
        view; when present and non-empty no fetch is made for it. Returns
        ``None`` if another period was selected while this one was loading.
        """
        period = as_period(period)
        self.selected = period

        if period is Period.MONTHLY and monthly_rows:
            outcome = self._shape(monthly_rows, period)
        else:
            log.debug("chart_fetch", period=period.value)
            outcome = await self.load(period)

        if self.selected is not period:
            log.info("chart_stale_response", resolved=period.value, selected=self.selected.value)
            return None

        chart = outcome.map(
            lambda buckets: ChartData(period=period, buckets=buckets, provenance=Provenance.LIVE)
        ).recover(lambda err: self._fallback(period, err))

        self.current = chart
        return chart

    def _shape(self, rows, period) -> Either[AggregationSourceUnavailable, Tuple[Bucket, ...]]:
        try:
            return Right(buckets_from_rows(rows, period, self._today))
        except AggregationSourceUnavailable as e:
            return Left(e)


def series_frame(chart: ChartData, data_type: str = "all") -> pd.DataFrame:
    """Chart buckets as a frame with a ``name`` column plus the chosen series."""
    try:
        columns = SERIES[data_type]
    except KeyError:
        raise ValueError(f"Unknown data type {data_type!r}") from None

    rows = [b.to_dict() for b in chart.buckets]
    df = pd.DataFrame(rows, columns=["name", "income", "expenses", "balance"])
    return df[["name", *columns]]
