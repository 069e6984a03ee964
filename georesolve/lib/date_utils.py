from datetime import UTC, date, datetime

from dateutil.relativedelta import relativedelta

from georesolve.models.weather import DateRange


def utcnow() -> datetime:
    """Return a datetime object representing the current time in UTC."""
    return datetime.now(UTC)


def format_iso_date(d: date, /) -> str:
    """
    Format a date as YYYY-MM-DD.

    >>> format_iso_date(date(2024, 6, 1))
    '2024-06-01'
    """
    return d.strftime('%Y-%m-%d')


def collect_historical_ranges(
    date_range: DateRange,
    now: datetime | date | None = None,
    num_years: int = 1,
) -> list[DateRange]:
    """
    Collect the same calendar period from past years, most recent first.

    The range is projected onto the year of now, then moved back a year at a time
    until it ends strictly before now. Each returned range spans the same number of days.

    >>> collect_historical_ranges((date(2024, 6, 1), date(2024, 6, 10)), date(2024, 6, 5), 1)
    [(datetime.date(2023, 6, 1), datetime.date(2023, 6, 10))]
    """
    start, end = date_range
    if start > end:
        raise ValueError(f'Range start {start} is after its end {end}')

    if now is None:
        now = utcnow()
    today = now.date() if isinstance(now, datetime) else now
    span = end - start

    # relativedelta clamps February 29 to the 28th in non-leap years
    year = today.year
    while start + relativedelta(year=year) + span >= today:
        year -= 1

    result: list[DateRange] = []
    for i in range(max(1, num_years)):
        range_start = start + relativedelta(year=year - i)
        result.append((range_start, range_start + span))
    return result
