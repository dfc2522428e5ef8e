import calendar
from datetime import date

from crm.exceptions import InvalidPeriod

MIN_YEAR = 2000
MAX_YEAR = 2100


def _as_int(value) -> int:
    # bool is an int subclass; floats must be whole
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidPeriod('Month and year must be integers')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidPeriod('Month and year must be integers')


def validate_period(month, year) -> tuple[int, int]:
    """Coerce ``month``/``year`` to ints or raise :class:`InvalidPeriod`."""
    if month in (None, '') or year in (None, ''):
        raise InvalidPeriod('Month and year are required')
    m, y = _as_int(month), _as_int(year)
    if not 1 <= m <= 12:
        raise InvalidPeriod('Month must be between 1 and 12')
    if not MIN_YEAR <= y <= MAX_YEAR:
        raise InvalidPeriod(f'Year must be between {MIN_YEAR} and {MAX_YEAR}')
    return m, y


def previous_period(month: int, year: int) -> tuple[int, int]:
    if month == 1:
        return 12, year - 1
    return month - 1, year


def last_day_of_month(month: int, year: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def period_bounds(month: int, year: int) -> tuple[date, date]:
    return date(year, month, 1), last_day_of_month(month, year)
