"""Exceptions raised by the event store."""


class EventStoreError(Exception):
    """Base class for event store failures."""


class StoreUnavailable(EventStoreError):
    """The backing store could not complete a request (network, timeout, throttling)."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class ConfigurationError(EventStoreError):
    """Required settings are missing or invalid."""


class TableProvisioningError(EventStoreError):
    """The backing table could not be checked or created."""
