"""Exceptions raised at the persistence and service boundaries."""


class FleetError(Exception):
    """Base class for fleet reminder errors."""


class VehicleNotFoundError(FleetError, LookupError):
    def __init__(self, vehicle_id: str):
        super().__init__(f"Vehicle '{vehicle_id}' not found")
        self.vehicle_id = vehicle_id


class NotificationNotFoundError(FleetError, LookupError):
    def __init__(self, notification_id: int):
        super().__init__(f"Notification {notification_id} not found")
        self.notification_id = notification_id


class SnapshotUnavailableError(FleetError):
    """The registry has no snapshot for the requested vehicle."""

    def __init__(self, vehicle_id: str):
        super().__init__(f"No registry data available for vehicle '{vehicle_id}'")
        self.vehicle_id = vehicle_id


class InvalidDataFileError(FleetError):
    """A stored data file exists but cannot be read as the expected document."""

    def __init__(self, filename, reason: str):
        super().__init__(f"Invalid data file {filename}: {reason}")
        self.filename = filename
        self.reason = reason


class VehicleExistsError(FleetError):
    def __init__(self, vehicle_id: str):
        super().__init__(f"Vehicle '{vehicle_id}' already exists")
        self.vehicle_id = vehicle_id


class InvalidDateError(FleetError, ValueError):
    def __init__(self, value):
        super().__init__(f"invalid date: {value!r} (expected YYYY-MM-DD)")
        self.value = value
