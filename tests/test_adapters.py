"""Tests for event store adapters."""
import pytest
from unittest.mock import MagicMock, patch
from botocore.exceptions import ClientError, EndpointConnectionError, WaiterError
from eventstore.adapters.memory import InMemoryAdapter
from eventstore.adapters.dynamodb import DynamoDBAdapter
from eventstore.errors import ConfigurationError, StoreUnavailable, TableProvisioningError
from eventstore.event_models import Event


def client_error(code: str, operation: str = "DescribeTable") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.mark.asyncio
async def test_memory_adapter_put_and_get():
    """Test in-memory adapter stores and returns events."""
    adapter = InMemoryAdapter()
    adapter.ensure_table()

    await adapter.put(Event(id="evt-1", body="hello"))
    event = await adapter.get("evt-1")

    assert event == Event(id="evt-1", body="hello")


@pytest.mark.asyncio
async def test_memory_adapter_missing_returns_none():
    adapter = InMemoryAdapter()
    adapter.ensure_table()

    assert await adapter.get("nonexistent-id") is None


@pytest.mark.asyncio
async def test_memory_adapter_requires_table():
    """Test in-memory adapter fails like an unprovisioned remote table."""
    adapter = InMemoryAdapter()

    with pytest.raises(StoreUnavailable):
        await adapter.get("evt-1")
    with pytest.raises(StoreUnavailable):
        await adapter.put(Event(id="evt-1", body="hello"))


def test_memory_adapter_ensure_table_idempotent():
    adapter = InMemoryAdapter()
    adapter.ensure_table()
    adapter.ensure_table()

    assert adapter.tables_created == 1


@pytest.mark.asyncio
async def test_memory_adapter_health_check():
    """Test in-memory adapter health check."""
    adapter = InMemoryAdapter()
    assert await adapter.health_check() is False
    adapter.ensure_table()
    assert await adapter.health_check() is True


def test_dynamodb_adapter_requires_credentials():
    """Test that missing credentials are a configuration error."""
    with pytest.raises(ConfigurationError) as exc_info:
        DynamoDBAdapter(access_key_id="AKIA", secret_access_key=None)

    assert "AWS_SECRET_ACCESS_KEY" in str(exc_info.value)


def test_dynamodb_adapter_builds_client_from_settings():
    with patch("eventstore.adapters.dynamodb.boto3") as mock_boto3:
        DynamoDBAdapter(
            access_key_id="AKIA",
            secret_access_key="secret",
            region_name="eu-west-1",
            endpoint_url="http://localhost:8000",
        )

        args, kwargs = mock_boto3.client.call_args
        assert args == ("dynamodb",)
        assert kwargs["aws_access_key_id"] == "AKIA"
        assert kwargs["aws_secret_access_key"] == "secret"
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["endpoint_url"] == "http://localhost:8000"


def test_dynamodb_ensure_table_existing_is_noop():
    mock_client = MagicMock()
    mock_client.describe_table.return_value = {"Table": {"TableStatus": "ACTIVE"}}

    adapter = DynamoDBAdapter(table_name="Event", client=mock_client)
    adapter.ensure_table()
    adapter.ensure_table()

    assert mock_client.describe_table.call_count == 2
    mock_client.create_table.assert_not_called()


def test_dynamodb_ensure_table_creates_missing_table():
    """Test table creation with a string hash key and on-demand billing."""
    mock_client = MagicMock()
    mock_client.describe_table.side_effect = client_error("ResourceNotFoundException")

    adapter = DynamoDBAdapter(table_name="Event", client=mock_client)
    adapter.ensure_table()

    mock_client.create_table.assert_called_once_with(
        TableName="Event",
        AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        BillingMode="PAY_PER_REQUEST",
    )
    mock_client.get_waiter.assert_called_once_with("table_exists")
    mock_client.get_waiter.return_value.wait.assert_called_once()


def test_dynamodb_ensure_table_tolerates_concurrent_creation():
    mock_client = MagicMock()
    mock_client.describe_table.side_effect = client_error("ResourceNotFoundException")
    mock_client.create_table.side_effect = client_error("ResourceInUseException", "CreateTable")

    adapter = DynamoDBAdapter(client=mock_client)
    adapter.ensure_table()

    mock_client.get_waiter.return_value.wait.assert_called_once()


def test_dynamodb_ensure_table_check_failure():
    mock_client = MagicMock()
    mock_client.describe_table.side_effect = client_error("AccessDeniedException")

    adapter = DynamoDBAdapter(client=mock_client)
    with pytest.raises(TableProvisioningError):
        adapter.ensure_table()
    mock_client.create_table.assert_not_called()


def test_dynamodb_ensure_table_create_failure():
    mock_client = MagicMock()
    mock_client.describe_table.side_effect = client_error("ResourceNotFoundException")
    mock_client.create_table.side_effect = client_error("LimitExceededException", "CreateTable")

    adapter = DynamoDBAdapter(client=mock_client)
    with pytest.raises(TableProvisioningError):
        adapter.ensure_table()


def test_dynamodb_ensure_table_connection_failure():
    mock_client = MagicMock()
    mock_client.describe_table.side_effect = EndpointConnectionError(
        endpoint_url="http://localhost:8000"
    )

    adapter = DynamoDBAdapter(client=mock_client)
    with pytest.raises(TableProvisioningError):
        adapter.ensure_table()


def test_dynamodb_ensure_table_wait_failure():
    mock_client = MagicMock()
    mock_client.describe_table.side_effect = client_error("ResourceNotFoundException")
    mock_client.get_waiter.return_value.wait.side_effect = WaiterError(
        name="TableExists", reason="Max attempts exceeded", last_response={}
    )

    adapter = DynamoDBAdapter(client=mock_client)
    with pytest.raises(TableProvisioningError):
        adapter.ensure_table()


@pytest.mark.asyncio
async def test_dynamodb_get_found():
    """Test get projects only the body attribute."""
    mock_client = MagicMock()
    mock_client.get_item.return_value = {"Item": {"body": {"S": "hello"}}}

    adapter = DynamoDBAdapter(table_name="Event", client=mock_client)
    event = await adapter.get("evt-1")

    assert event == Event(id="evt-1", body="hello")
    mock_client.get_item.assert_called_once_with(
        TableName="Event",
        Key={"id": {"S": "evt-1"}},
        ProjectionExpression="#body",
        ExpressionAttributeNames={"#body": "body"},
    )


@pytest.mark.asyncio
async def test_dynamodb_get_missing_returns_none():
    mock_client = MagicMock()
    mock_client.get_item.return_value = {}

    adapter = DynamoDBAdapter(client=mock_client)
    assert await adapter.get("nonexistent-id") is None


@pytest.mark.asyncio
async def test_dynamodb_get_failure_raises_store_unavailable():
    """Test that store errors are never reported as a missing event."""
    mock_client = MagicMock()
    mock_client.get_item.side_effect = client_error(
        "ProvisionedThroughputExceededException", "GetItem"
    )

    adapter = DynamoDBAdapter(client=mock_client)
    with pytest.raises(StoreUnavailable) as exc_info:
        await adapter.get("evt-1")

    assert exc_info.value.operation == "get"


@pytest.mark.asyncio
async def test_dynamodb_put_writes_item():
    mock_client = MagicMock()

    adapter = DynamoDBAdapter(table_name="Event", client=mock_client)
    await adapter.put(Event(id="evt-1", body="hello"))

    mock_client.put_item.assert_called_once_with(
        TableName="Event",
        Item={"id": {"S": "evt-1"}, "body": {"S": "hello"}},
    )


@pytest.mark.asyncio
async def test_dynamodb_put_failure_raises_store_unavailable():
    mock_client = MagicMock()
    mock_client.put_item.side_effect = EndpointConnectionError(endpoint_url="http://localhost:8000")

    adapter = DynamoDBAdapter(client=mock_client)
    with pytest.raises(StoreUnavailable) as exc_info:
        await adapter.put(Event(id="evt-1", body="hello"))

    assert exc_info.value.operation == "put"


@pytest.mark.asyncio
async def test_dynamodb_health_check_active():
    mock_client = MagicMock()
    mock_client.describe_table.return_value = {"Table": {"TableStatus": "ACTIVE"}}

    adapter = DynamoDBAdapter(client=mock_client)
    assert await adapter.health_check() is True


@pytest.mark.asyncio
async def test_dynamodb_health_check_failure():
    """Test health check reports False instead of raising."""
    mock_client = MagicMock()
    mock_client.describe_table.side_effect = Exception("Connection refused")

    adapter = DynamoDBAdapter(client=mock_client)
    assert await adapter.health_check() is False


def test_dynamodb_ensure_table_waits_for_creating_table():
    """Test that a table another instance is still creating is waited on."""
    mock_client = MagicMock()
    mock_client.describe_table.return_value = {"Table": {"TableStatus": "CREATING"}}

    adapter = DynamoDBAdapter(table_name="Event", client=mock_client)
    adapter.ensure_table()

    mock_client.create_table.assert_not_called()
    mock_client.get_waiter.assert_called_once_with("table_exists")
    mock_client.get_waiter.return_value.wait.assert_called_once()


def test_dynamodb_close_releases_client():
    mock_client = MagicMock()

    adapter = DynamoDBAdapter(client=mock_client)
    adapter.close()

    mock_client.close.assert_called_once()
