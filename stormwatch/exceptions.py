"""
Stormwatch exceptions.

Everything raised on purpose by the package derives from StormwatchError.
"""


class StormwatchError(Exception):
    """Base class for Stormwatch errors."""


class StationNotFoundError(StormwatchError):
    """No readings have been ingested for the requested station yet."""

    def __init__(self, station_id: str):
        self.station_id = station_id
        super().__init__(f"No data yet for station {station_id!r}")


class IntegrationError(StormwatchError):
    """A notification integration could not deliver an alert."""


class IntegrationNotConfiguredError(IntegrationError):
    """The integration is registered but lacks the settings it needs."""


class DeliveryError(IntegrationError):
    """The downstream channel rejected or failed the delivery."""
