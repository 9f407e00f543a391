"""In-memory event store adapter."""
import structlog
from .base import StoreAdapter
from ..errors import StoreUnavailable
from ..event_models import Event

log = structlog.get_logger()


class InMemoryAdapter(StoreAdapter):
    """In-memory implementation of the event store adapter.

    Behaves like an unprovisioned remote table until ensure_table() runs:
    reads and writes before that fail with StoreUnavailable.
    """

    name = "memory"

    def __init__(self, table_name: str = "Event"):
        self.table_name = table_name
        self._items: dict[str, str] | None = None
        self.tables_created = 0

    def ensure_table(self) -> None:
        if self._items is not None:
            log.info("table.exists", table=self.table_name, adapter=self.name)
            return
        self._items = {}
        self.tables_created += 1
        log.info("table.created", table=self.table_name, adapter=self.name)

    async def get(self, event_id: str) -> Event | None:
        body = self._table("get").get(event_id)
        if body is None:
            return None
        return Event(id=event_id, body=body)

    async def put(self, event: Event) -> None:
        self._table("put")[event.id] = event.body

    async def health_check(self) -> bool:
        return self._items is not None

    def _table(self, operation: str) -> dict[str, str]:
        if self._items is None:
            raise StoreUnavailable(operation, f"table {self.table_name} does not exist")
        return self._items
