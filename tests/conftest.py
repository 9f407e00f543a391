"""Shared fixtures."""
import pytest
from fastapi.testclient import TestClient
from eventstore.adapters.memory import InMemoryAdapter
from eventstore.config import Settings
from eventstore.main import create_app
from eventstore.metrics import Metrics
from eventstore.services.event_store import EventStore


@pytest.fixture
def settings() -> Settings:
    return Settings(STORE_BACKEND="memory", LOG_JSON=False, MAX_EVENT_SIZE=1024)


@pytest.fixture
def memory_adapter() -> InMemoryAdapter:
    return InMemoryAdapter()


@pytest.fixture
def store(memory_adapter) -> EventStore:
    return EventStore(adapter=memory_adapter, metrics=Metrics())


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    # Entering the context runs startup, which provisions the table
    with TestClient(app) as test_client:
        yield test_client
