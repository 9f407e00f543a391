"""Base adapter interface for event store backends."""
from abc import ABC, abstractmethod
from ..event_models import Event


class StoreAdapter(ABC):
    """Abstract interface for event store backend implementations."""

    name: str = "base"

    @abstractmethod
    def ensure_table(self) -> None:
        """
        Make sure the backing table exists, creating it if absent.

        Blocking; called once at startup before traffic is served.

        Raises:
            TableProvisioningError: If the table cannot be checked or created
        """
        pass

    @abstractmethod
    async def get(self, event_id: str) -> Event | None:
        """
        Fetch a single event by id.

        Args:
            event_id: The event identifier

        Returns:
            The event, or None if no record has that id

        Raises:
            StoreUnavailable: If the backend call fails
        """
        pass

    @abstractmethod
    async def put(self, event: Event) -> None:
        """
        Write an event unconditionally.

        Args:
            event: The event to persist

        Raises:
            StoreUnavailable: If the backend call fails
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the backend is healthy and accessible.

        Returns:
            True if backend is healthy, False otherwise
        """
        pass

    def close(self) -> None:
        """Release backend resources. No-op unless the backend holds connections."""
        pass
