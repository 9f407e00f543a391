"""Amazon DynamoDB event store adapter."""
import asyncio
from functools import partial
from typing import Any, Callable
import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from .base import StoreAdapter
from ..errors import ConfigurationError, StoreUnavailable, TableProvisioningError
from ..event_models import Event

log = structlog.get_logger()


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


class DynamoDBAdapter(StoreAdapter):
    """DynamoDB implementation of the event store adapter.

    Each event is one item in a single table keyed by the string
    attribute ``id``. The boto3 client is synchronous, so reads and
    writes run in the event loop's default executor.
    """

    name = "dynamodb"

    def __init__(
        self,
        table_name: str = "Event",
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        region_name: str = "us-east-1",
        endpoint_url: str | None = None,
        connect_timeout: float = 5.0,
        read_timeout: float = 10.0,
        client: Any | None = None,
    ):
        """
        Initialize the DynamoDB adapter.

        Args:
            table_name: Name of the events table
            access_key_id: AWS access key
            secret_access_key: AWS secret key
            region_name: AWS region, used for signing even with an endpoint override
            endpoint_url: Endpoint override for local or test instances
            connect_timeout: Client connect timeout in seconds
            read_timeout: Client request timeout in seconds
            client: Pre-built boto3 DynamoDB client (skips credential checks)

        Raises:
            ConfigurationError: If no client is given and credentials are missing
        """
        self.table_name = table_name
        self.endpoint_url = endpoint_url
        if client is None:
            missing = [
                name
                for name, value in (
                    ("AWS_ACCESS_KEY_ID", access_key_id),
                    ("AWS_SECRET_ACCESS_KEY", secret_access_key),
                )
                if not value
            ]
            if missing:
                raise ConfigurationError(
                    f"DynamoDB backend requires credentials: missing {', '.join(missing)}"
                )
            client = boto3.client(
                "dynamodb",
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                region_name=region_name,
                endpoint_url=endpoint_url,
                config=Config(connect_timeout=connect_timeout, read_timeout=read_timeout),
            )
            log.info(
                "dynamodb.client_created",
                region=region_name,
                endpoint=endpoint_url or "default",
            )
        self._client = client

    def ensure_table(self) -> None:
        """
        Create the events table if it does not exist.

        The table has a single string hash key ``id`` and on-demand
        billing. Blocks until the table is active, including when
        another instance created it and it is still CREATING.

        Raises:
            TableProvisioningError: If the check or creation fails
        """
        status = self._table_status()
        if status == "ACTIVE":
            log.info("table.exists", table=self.table_name, adapter=self.name)
            return

        if status is None:
            self._create_table()
        else:
            log.info("table.not_active", table=self.table_name, status=status)

        try:
            self._client.get_waiter("table_exists").wait(
                TableName=self.table_name,
                WaiterConfig={"Delay": 1, "MaxAttempts": 60},
            )
        except (BotoCoreError, ClientError) as e:
            log.error("table.wait_failed", table=self.table_name, error=str(e))
            raise TableProvisioningError(
                f"Table {self.table_name} did not become active: {e}"
            ) from e

        log.info("table.ready", table=self.table_name, adapter=self.name)

    def _table_status(self) -> str | None:
        """Return the table status, or None if the table does not exist."""
        try:
            response = self._client.describe_table(TableName=self.table_name)
        except ClientError as e:
            if _error_code(e) == "ResourceNotFoundException":
                return None
            log.error("table.check_failed", table=self.table_name, error=str(e))
            raise TableProvisioningError(
                f"Could not check table {self.table_name}: {e}"
            ) from e
        except BotoCoreError as e:
            log.error("table.check_failed", table=self.table_name, error=str(e))
            raise TableProvisioningError(f"Could not check table {self.table_name}: {e}") from e
        return response.get("Table", {}).get("TableStatus")

    def _create_table(self):
        try:
            self._client.create_table(
                TableName=self.table_name,
                AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
                KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
                BillingMode="PAY_PER_REQUEST",
            )
            log.info("table.creating", table=self.table_name, adapter=self.name)
        except ClientError as e:
            # Another instance created it between our check and create
            if _error_code(e) != "ResourceInUseException":
                log.error("table.create_failed", table=self.table_name, error=str(e))
                raise TableProvisioningError(
                    f"Could not create table {self.table_name}: {e}"
                ) from e
            log.info("table.created_concurrently", table=self.table_name)
        except BotoCoreError as e:
            log.error("table.create_failed", table=self.table_name, error=str(e))
            raise TableProvisioningError(f"Could not create table {self.table_name}: {e}") from e

    async def get(self, event_id: str) -> Event | None:
        """Fetch an event, projecting only its body attribute."""
        response = await self._call(
            "get",
            self._client.get_item,
            TableName=self.table_name,
            Key={"id": {"S": event_id}},
            ProjectionExpression="#body",
            ExpressionAttributeNames={"#body": "body"},
        )
        item = response.get("Item")
        if not item:
            return None
        return Event(id=event_id, body=item.get("body", {}).get("S", ""))

    async def put(self, event: Event) -> None:
        """Write an event item, overwriting any item with the same id."""
        await self._call(
            "put",
            self._client.put_item,
            TableName=self.table_name,
            Item={"id": {"S": event.id}, "body": {"S": event.body}},
        )

    async def health_check(self) -> bool:
        """
        Check that the events table is reachable and active.

        Returns:
            True if the table status is ACTIVE, False otherwise
        """
        try:
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(
                None, partial(self._client.describe_table, TableName=self.table_name)
            )
            return response.get("Table", {}).get("TableStatus") == "ACTIVE"
        except Exception as e:
            log.warning("dynamodb.health_check_failed", error=str(e))
            return False

    async def _call(self, operation: str, fn: Callable[..., dict], **kwargs) -> dict:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, partial(fn, **kwargs))
        except (ClientError, BotoCoreError) as e:
            log.error(
                f"dynamodb.{operation}_failed",
                table=self.table_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StoreUnavailable(operation, str(e)) from e

    def close(self):
        """Close the underlying HTTP connection pool."""
        self._client.close()
