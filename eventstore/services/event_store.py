"""Event store service with pluggable backend adapters."""
from ..event_models import Event, new_event_id
from ..adapters.base import StoreAdapter
from ..adapters.memory import InMemoryAdapter
from ..adapters.dynamodb import DynamoDBAdapter
from ..config import Settings, get_settings
from ..errors import StoreUnavailable
from ..metrics import Metrics
import structlog
import time

log = structlog.get_logger()


class EventStore:
    """
    Reads and writes Event records through a backend adapter.

    The adapter is selected from the STORE_BACKEND setting unless one
    is passed in explicitly.
    """

    def __init__(self, adapter: StoreAdapter | None = None, metrics: Metrics | None = None):
        """
        Initialize the event store.

        Args:
            adapter: Backend adapter to use (defaults to configured adapter)
            metrics: Prometheus metrics to record operations on
        """
        if adapter is None:
            adapter = create_adapter(get_settings())
        self._adapter = adapter
        self._metrics = metrics

    @property
    def backend(self) -> str:
        return self._adapter.name

    def ensure_table(self) -> None:
        """Provision the backing table; blocking, called at startup."""
        start_time = time.time()
        self._adapter.ensure_table()
        log.info(
            "table.ready",
            adapter=self._adapter.name,
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )

    async def get(self, event_id: str) -> Event | None:
        """
        Look up an event by id.

        Returns None when no record matches; store failures raise
        StoreUnavailable.
        """
        start_time = time.time()
        try:
            event = await self._adapter.get(event_id)
        except StoreUnavailable:
            self._record("get", start_time, result="error")
            raise

        if event is None:
            log.info("event.not_found", id=event_id)
            self._record("get", start_time, result="not_found")
            return None

        log.info("event.fetched", id=event_id)
        self._record("get", start_time, result="found")
        return event

    async def put(self, body: str) -> str:
        """
        Store a new event and return its generated id.

        The write completes before this returns.
        """
        start_time = time.time()
        event = Event(id=new_event_id(), body=body)
        try:
            await self._adapter.put(event)
        except StoreUnavailable:
            self._record("put", start_time, result="error")
            raise

        log.info("event.created", id=event.id, size_bytes=len(body.encode("utf-8")))
        self._record("put", start_time, result="created")
        if self._metrics:
            self._metrics.record_event_created(len(body.encode("utf-8")))
        return event.id

    async def health_check(self) -> bool:
        """Check backend adapter health."""
        return await self._adapter.health_check()

    def close(self):
        """Release the backend adapter's connections."""
        self._adapter.close()
        log.info("store.closed", adapter=self._adapter.name)

    def _record(self, operation: str, start_time: float, result: str):
        if not self._metrics:
            return
        self._metrics.observe_store_latency(operation, time.time() - start_time)
        if operation == "get":
            self._metrics.record_lookup(result)
        if result == "error":
            self._metrics.record_store_error(operation)


def create_adapter(settings: Settings) -> StoreAdapter:
    """
    Create the store adapter based on configuration.

    Returns:
        StoreAdapter instance based on STORE_BACKEND setting

    Raises:
        ConfigurationError: If the DynamoDB backend lacks credentials
    """
    if settings.STORE_BACKEND == "memory":
        log.info("adapter.selected", type="memory", table=settings.TABLE_NAME)
        return InMemoryAdapter(table_name=settings.TABLE_NAME)

    log.info(
        "adapter.selected",
        type="dynamodb",
        table=settings.TABLE_NAME,
        endpoint=settings.DYNAMODB_ENDPOINT or "default",
    )
    return DynamoDBAdapter(
        table_name=settings.TABLE_NAME,
        access_key_id=settings.AWS_ACCESS_KEY_ID,
        secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_REGION,
        endpoint_url=settings.DYNAMODB_ENDPOINT,
        connect_timeout=settings.DYNAMODB_CONNECT_TIMEOUT,
        read_timeout=settings.DYNAMODB_READ_TIMEOUT,
    )
