"""
Canonical flight log data model.

FlightRecord is one normalized leg from the spreadsheet. FlightStats is the
summary derived from a full set of records; it is never updated in place,
only recomputed.
"""

from dataclasses import dataclass, field, fields


@dataclass(frozen=True)
class FlightRecord:
    serial: str
    date: str
    from_: str = ''
    to: str = ''
    takeoff_hours: int = 0
    takeoff_minutes: int = 0
    landing_hours: int = 0
    landing_minutes: int = 0
    flight_hours: int = 0
    flight_minutes: int = 0
    cycles: int = 0
    # Cumulative airborne time as of this row
    total_flight_hours: int = 0
    total_flight_minutes: int = 0
    total_cycles: int = 0
    tlb_number: str = ''
    last_date: str = ''
    total_hours: int = 0
    total_minutes: int = 0
    total_cycles_sum: int = 0
    hours_per_month: int = 0
    cycles_per_month: int = 0

    @property
    def route(self):
        return f"{self.from_}-{self.to}"

    @property
    def is_valid(self):
        """A record is kept only when it has both a serial and a date."""
        return bool(self.serial) and bool(self.date)

    def to_dict(self):
        """Return the record keyed the way exported reports name fields."""
        return {EXPORT_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}


# Attribute name -> exported key
EXPORT_NAMES = {
    'serial': 'ser',
    'date': 'date',
    'from_': 'from',
    'to': 'to',
    'takeoff_hours': 'takeoffHours',
    'takeoff_minutes': 'takeoffMinutes',
    'landing_hours': 'landingHours',
    'landing_minutes': 'landingMinutes',
    'flight_hours': 'flightHours',
    'flight_minutes': 'flightMinutes',
    'cycles': 'cycles',
    'total_flight_hours': 'totalFlightHours',
    'total_flight_minutes': 'totalFlightMinutes',
    'total_cycles': 'totalCycles',
    'tlb_number': 'tlbNumber',
    'last_date': 'lastDate',
    'total_hours': 'totalHours',
    'total_minutes': 'totalMinutes',
    'total_cycles_sum': 'totalCyclesSum',
    'hours_per_month': 'hoursPerMonth',
    'cycles_per_month': 'cyclesPerMonth',
}


# ============ Total flight time sources ============

@dataclass(frozen=True)
class ColonEncoded:
    """Total time read from an "H:MM" cell."""
    hours: int
    minutes: int


@dataclass(frozen=True)
class PlainHours:
    """Total time read from a whole-hours cell; minutes are always 0."""
    hours: int

    @property
    def minutes(self):
        return 0


# ============ Statistics ============

@dataclass
class MonthStats:
    # hours holds accumulated minutes; the name matches the exported report
    hours: int = 0
    flights: int = 0
    cycles: int = 0

    def to_dict(self):
        return {'hours': self.hours, 'flights': self.flights, 'cycles': self.cycles}


@dataclass
class RouteStats:
    count: int = 0
    total_time: int = 0

    def to_dict(self):
        return {'count': self.count, 'totalTime': self.total_time}


@dataclass(frozen=True)
class FlightStats:
    total_flight_time: str = '0:00'
    total_cycles: int = 0
    total_flights: int = 0
    average_flight_time: str = '0:00'
    most_frequent_route: str = 'N/A'
    total_days: int = 0
    average_flights_per_day: float = 0
    monthly_stats: dict = field(default_factory=dict)
    route_stats: dict = field(default_factory=dict)

    def to_dict(self):
        return {
            'totalFlightTime': self.total_flight_time,
            'totalCycles': self.total_cycles,
            'totalFlights': self.total_flights,
            'averageFlightTime': self.average_flight_time,
            'mostFrequentRoute': self.most_frequent_route,
            'totalDays': self.total_days,
            'averageFlightsPerDay': self.average_flights_per_day,
            'monthlyStats': {k: v.to_dict() for k, v in self.monthly_stats.items()},
            'routeStats': {k: v.to_dict() for k, v in self.route_stats.items()},
        }
