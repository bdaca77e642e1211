"""Fixed-window averages over sparse daily history.

The history source omits days with zero trades, so averages divide by the
calendar width of the requested window, never by the number of entries.
"""

from collections import defaultdict
from collections.abc import Sequence
from datetime import date, timedelta

from src.mx_market.domain.models import DailyPoint


def window_start(latest: date, window_days: int) -> date:
    """First calendar day of a window of window_days ending at latest (inclusive)."""
    return latest - timedelta(days=window_days - 1)


def avg_daily_volume(entries: Sequence[DailyPoint], window_days: int) -> float:
    """Average traded volume per calendar day over the last window_days days.

    The window ends at the latest date present in entries. Missing days
    contribute zero. Returns 0 when there is no history or the window is empty.
    """
    if not entries or window_days <= 0:
        return 0.0
    vol_by_date: dict[date, float] = defaultdict(float)
    for e in entries:
        if e.volume > 0:
            vol_by_date[e.date] += float(e.volume)
    latest = max(e.date for e in entries)
    first = window_start(latest, window_days)
    total = sum(v for d, v in vol_by_date.items() if first <= d <= latest)
    return total / window_days
