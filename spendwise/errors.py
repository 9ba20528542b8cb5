from typing import Optional


class SpendwiseError(Exception):
    pass


class InvalidSortKey(SpendwiseError, ValueError):
    def __init__(self, key):
        super().__init__(f"Unknown sort key {key!r}; expected one of date, label, amount")
        self.key = key


class InvalidFilter(SpendwiseError, ValueError):
    def __init__(self, value):
        super().__init__(f"Unknown filter {value!r}; expected one of all, income, expense")
        self.value = value


class InvalidDirection(SpendwiseError, ValueError):
    def __init__(self, value):
        super().__init__(f"Unknown sort direction {value!r}; expected asc or desc")
        self.value = value


class AggregationSourceUnavailable(SpendwiseError):
    """The period data source failed or returned an unusable payload.

    Never shown to the user: the chart loader turns it into fallback buckets.
    """

    def __init__(self, period, cause: Optional[BaseException] = None, message: str = ""):
        detail = message or (str(cause) if cause else "source unavailable")
        super().__init__(f"{getattr(period, 'value', period)}: {detail}")
        self.period = period
        self.cause = cause
