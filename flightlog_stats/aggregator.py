"""
Fold FlightRecords into FlightStats.

All time figures are minutes of cumulative airborne time taken from each
record's Total F\\H value. calculate_stats() is a pure function of its input.
"""

import math

from .dates import month_key, parse_date
from .records import FlightStats, MonthStats, RouteStats


NO_ROUTE = 'N/A'
SECONDS_PER_DAY = 24 * 60 * 60


def minutes_of(record):
    """Cumulative time of a record in minutes, never negative."""
    return max(record.total_flight_hours * 60 + record.total_flight_minutes, 0)


def format_time(total_minutes):
    """Format minutes as "H:MM" (125 -> "2:05")."""
    return f"{total_minutes // 60}:{total_minutes % 60:02d}"


def parse_time_back(text):
    """Inverse of format_time ("2:05" -> 125)."""
    hours, _, minutes = text.partition(':')
    return int(hours) * 60 + int(minutes or 0)


def round_half_up(value):
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def route_statistics(records):
    """Group records by route, keeping first-seen order.

    Returns:
        Dict route -> RouteStats.
    """
    routes = {}
    for record in records:
        stats = routes.setdefault(record.route, RouteStats())
        stats.count += 1
        stats.total_time += minutes_of(record)
    return routes


def most_frequent_route(routes):
    """Route with the highest count; on a tie the first one seen wins."""
    best = NO_ROUTE
    best_count = 0
    for route, stats in routes.items():
        if stats.count > best_count:
            best, best_count = route, stats.count
    return best


def monthly_statistics(records, dayfirst=False):
    """Bucket records with a readable date by UTC year-month.

    Records whose date cannot be parsed are left out.
    """
    months = {}
    for record in records:
        when = parse_date(record.date, dayfirst=dayfirst)
        if when is None:
            continue
        stats = months.setdefault(month_key(when), MonthStats())
        stats.hours += minutes_of(record)
        stats.flights += 1
        stats.cycles += record.total_cycles
    return months


def day_span(records, dayfirst=False):
    """Days covered by the records' dates, counting both ends.

    One date gives 1; no readable dates gives 0.
    """
    dates = [d for d in (parse_date(r.date, dayfirst=dayfirst) for r in records) if d]
    if not dates:
        return 0
    seconds = (max(dates) - min(dates)).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY) + 1


def calculate_stats(records, dayfirst=False):
    """Compute FlightStats for a set of valid records.

    Args:
        records: Sequence of valid FlightRecords, in input order.
        dayfirst: Read ambiguous slash dates as DD/MM.

    Returns:
        FlightStats.
    """
    records = list(records)
    if not records:
        return FlightStats(
            total_flight_time='0:00',
            total_cycles=0,
            total_flights=0,
            average_flight_time='0:00',
            most_frequent_route=NO_ROUTE,
            total_days=0,
            average_flights_per_day=0,
            monthly_stats={},
            route_stats={},
        )

    total_minutes = sum(minutes_of(r) for r in records)
    total_flights = len(records)
    routes = route_statistics(records)
    total_days = day_span(records, dayfirst=dayfirst)

    if total_days > 0:
        per_day = round(total_flights / total_days, 2)
    else:
        per_day = 0

    return FlightStats(
        total_flight_time=format_time(total_minutes),
        total_cycles=sum(r.total_cycles for r in records),
        total_flights=total_flights,
        average_flight_time=format_time(round_half_up(total_minutes / total_flights)),
        most_frequent_route=most_frequent_route(routes),
        total_days=total_days,
        average_flights_per_day=per_day,
        monthly_stats=monthly_statistics(records, dayfirst=dayfirst),
        route_stats=routes,
    )
