"""
Exceptions raised while loading a flight log workbook.

All of them derive from ValueError, so a caller that only cares about
"this file could not be used" can catch ValueError.
"""


class FlightDataError(ValueError):
    """Base class for errors that reject a whole upload."""


class DecodeError(FlightDataError):
    """The file is not a readable workbook."""


class ValidationError(FlightDataError):
    """The workbook was read but its layout is not usable."""


class MissingHeadersError(ValidationError):
    """One or more required column headers are absent.

    Attributes:
        missing: List of the missing header names, in required order.
    """

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(
            f"Missing required headers: {', '.join(self.missing)}"
        )


class EmptyResultError(FlightDataError):
    """Every data row was dropped as invalid."""

    def __init__(self, message="No valid flight data found in the file"):
        super().__init__(message)
