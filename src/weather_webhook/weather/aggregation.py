"""Reduction of 3-hour forecast samples into daily summaries."""

import logging
from collections import Counter, defaultdict
from datetime import date, datetime
from typing import Dict, Hashable, Iterable, List, Sequence, TypeVar, Union

from weather_webhook.config import MAX_FORECAST_DAYS
from weather_webhook.weather.errors import DayCountOutOfRangeError, NoForecastDataError
from weather_webhook.weather.models import DayAggregate, ForecastRecord

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


def group_by_date(records: Iterable[ForecastRecord]) -> Dict[date, List[ForecastRecord]]:
    """Group forecast records by calendar date.

    Args:
        records: Forecast records in chronological order

    Returns:
        Dictionary mapping dates to their records, keys in chronological order
        and records in input order
    """
    daily_data: Dict[date, List[ForecastRecord]] = defaultdict(list)

    for record in records:
        daily_data[record.date].append(record)

    return {day: daily_data[day] for day in sorted(daily_data)}


def most_common_value(values: Sequence[T]) -> T:
    """Return the most frequent value.

    Among values sharing the highest count, the one that occurs first in
    ``values`` wins.

    Raises:
        ValueError: If values is empty
    """
    if not values:
        raise ValueError("Cannot pick the most common value of an empty sequence")

    # Counter keeps first-occurrence order, max() keeps the first maximum
    counts = Counter(values)
    return max(counts, key=counts.__getitem__)


def aggregate_day(records: Sequence[ForecastRecord]) -> DayAggregate:
    """Reduce the records of one calendar day to a DayAggregate.

    Args:
        records: Non-empty list of records sharing one date

    Returns:
        DayAggregate with min/max temperature, average humidity and wind speed
        and the most frequent description and icon

    Raises:
        ValueError: If records is empty
    """
    if not records:
        raise ValueError("Cannot aggregate an empty bucket")

    temperatures = [record.temperature for record in records]
    humidities = [record.humidity for record in records]
    wind_speeds = [record.wind_speed for record in records]

    return DayAggregate(
        date=records[0].date,
        temperature_min=round(min(temperatures), 1),
        temperature_max=round(max(temperatures), 1),
        description=most_common_value([record.description for record in records]),
        icon=most_common_value([record.icon for record in records]),
        humidity=round(sum(humidities) / len(humidities), 1),
        wind_speed=round(sum(wind_speeds) / len(wind_speeds), 1),
        samples=len(records),
    )


def select_by_date(
    target: Union[date, datetime],
    daily_data: Dict[date, List[ForecastRecord]]
) -> DayAggregate:
    """Aggregate the bucket matching the target's calendar date.

    Raises:
        NoForecastDataError: If there are no records for that date
    """
    if isinstance(target, datetime):
        target = target.date()

    records = daily_data.get(target)
    if not records:
        logger.info(f"No forecast data for {target}, available: {list(daily_data)}")
        raise NoForecastDataError(target)

    return aggregate_day(records)


def validate_day_count(day_count: int, max_days: int = MAX_FORECAST_DAYS) -> int:
    """Check that a day count lies within [1, max_days].

    Raises:
        DayCountOutOfRangeError: If it does not
    """
    if not 1 <= day_count <= max_days:
        raise DayCountOutOfRangeError(day_count, max_days)
    return day_count


def select_days(
    day_count: int,
    daily_data: Dict[date, List[ForecastRecord]],
    max_days: int = MAX_FORECAST_DAYS
) -> List[DayAggregate]:
    """Aggregate the first day_count days of the forecast.

    Returns fewer aggregates when the forecast covers fewer days.

    Raises:
        DayCountOutOfRangeError: If day_count is outside [1, max_days]
    """
    validate_day_count(day_count, max_days)

    aggregates = [
        aggregate_day(records)
        for _, records in sorted(daily_data.items())[:day_count]
        if records
    ]

    if len(aggregates) < day_count:
        logger.info(f"Requested {day_count} days but forecast covers only {len(aggregates)}")

    return aggregates
