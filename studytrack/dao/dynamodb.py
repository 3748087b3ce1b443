"""
DynamoDB implementations of the repository interfaces.

All DynamoDB-specific concerns live here (boto3 resource setup, table
bootstrapping, pagination, update expressions), keeping the service layer
storage-agnostic.

Table schema
────────────
  One table per resource, named <dynamodb_table_prefix><resource>:

    users       partition key  id       (String)
    directories partition key  id       (String)
    settings    partition key  user_id  (String)
    progress    partition key  user_id  (String)

Tables are created automatically on first use when they do not already
exist.  In production, prefer managing them via CloudFormation / SAM /
Terraform and removing the auto-create logic.
"""

import logging
from typing import Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from studytrack.config import Settings
from studytrack.dao.base import (
    DirectoryRepository,
    ProgressRepository,
    SettingsRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


class DynamoDBTable:
    """
    Lazily-created handle on one DynamoDB table.

    The boto3 resource and table handle are created on first use so that
    building the repositories does not immediately require live AWS
    credentials.
    """

    def __init__(self, settings: Settings, resource: str, key: str) -> None:
        self._settings = settings
        self.name = f"{settings.dynamodb_table_prefix}{resource}"
        self.key = key
        self._table = None  # populated on first access via get()

    def _build_resource(self):
        """Create a boto3 DynamoDB resource from application settings."""
        kwargs: dict = {"region_name": self._settings.aws_region}
        if self._settings.aws_access_key_id:
            kwargs["aws_access_key_id"] = self._settings.aws_access_key_id
            kwargs["aws_secret_access_key"] = self._settings.aws_secret_access_key
        if self._settings.dynamodb_endpoint_url:
            # Enables local DynamoDB (e.g. `dynamodb-local` container)
            kwargs["endpoint_url"] = self._settings.dynamodb_endpoint_url
        return boto3.resource("dynamodb", **kwargs)

    def get(self):
        """
        Return the Table handle, creating the table if it does not yet exist.
        The handle is cached after the first successful call.
        """
        if self._table is not None:
            return self._table

        ddb = self._build_resource()
        try:
            table = ddb.create_table(
                TableName=self.name,
                KeySchema=[{"AttributeName": self.key, "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": self.key, "AttributeType": "S"}],
                BillingMode="PAY_PER_REQUEST",
            )
            table.wait_until_exists()
            logger.info("DynamoDB table '%s' created.", self.name)
        except ClientError as exc:
            if exc.response["Error"]["Code"] == "ResourceInUseException":
                table = ddb.Table(self.name)
            else:
                raise

        self._table = table
        return self._table


class _DynamoDBRepository:
    """Operations shared by every table-backed repository."""

    resource = ""
    key = "id"

    def __init__(self, settings: Settings, table: Optional[DynamoDBTable] = None) -> None:
        self._table = table or DynamoDBTable(settings, self.resource, self.key)

    def save(self, record: dict) -> None:
        """
        Write *record* with a PutItem call.

        An existing item with the same key is completely replaced.
        """
        table = self._table.get()
        try:
            table.put_item(Item=record)
            logger.info("Saved %s record '%s'.", self.resource, record.get(self.key))
        except ClientError as exc:
            logger.error("DynamoDB PutItem on '%s' failed: %s", self._table.name, exc)
            raise

    def create(self, record: dict) -> bool:
        """
        Write *record* only if no item with the same key exists.

        The existence check and the write are one conditional PutItem, so two
        concurrent creates for the same key cannot both succeed.  Returns
        ``False`` when the item already exists.
        """
        table = self._table.get()
        try:
            table.put_item(
                Item=record,
                ConditionExpression="attribute_not_exists(#pk)",
                ExpressionAttributeNames={"#pk": self.key},
            )
        except ClientError as exc:
            if exc.response["Error"]["Code"] == "ConditionalCheckFailedException":
                logger.warning("%s record '%s' already exists.", self.resource, record.get(self.key))
                return False
            logger.error("DynamoDB PutItem on '%s' failed: %s", self._table.name, exc)
            raise
        logger.info("Created %s record '%s'.", self.resource, record.get(self.key))
        return True

    def _get(self, key_value: str) -> Optional[dict]:
        table = self._table.get()
        try:
            response = table.get_item(Key={self.key: key_value})
            return response.get("Item")  # None if key not found
        except ClientError as exc:
            logger.error("DynamoDB GetItem on '%s' failed for '%s': %s", self._table.name, key_value, exc)
            raise

    def _scan(self, condition) -> list[dict]:
        """
        Scan the table with a filter, following ``LastEvaluatedKey`` until
        every page has been read.
        """
        table = self._table.get()
        try:
            response = table.scan(FilterExpression=condition)
            items: list[dict] = response.get("Items", [])
            while "LastEvaluatedKey" in response:
                response = table.scan(
                    FilterExpression=condition,
                    ExclusiveStartKey=response["LastEvaluatedKey"],
                )
                items.extend(response.get("Items", []))
            return items
        except ClientError as exc:
            logger.error("DynamoDB Scan on '%s' failed: %s", self._table.name, exc)
            raise

    def _update(self, key_value: str, changes: dict) -> Optional[dict]:
        """
        SET every attribute in *changes* on an existing item.

        The ``attribute_exists`` condition stops UpdateItem from creating a
        new item; a failed condition is reported as ``None``.
        """
        if not changes:
            return self._get(key_value)
        names = {f"#f{i}": field for i, field in enumerate(changes)}
        values = {f":v{i}": value for i, value in enumerate(changes.values())}
        expression = "SET " + ", ".join(f"#f{i} = :v{i}" for i in range(len(changes)))
        return self._write_update(
            key_value,
            UpdateExpression=expression,
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
        )

    def _write_update(self, key_value: str, **kwargs) -> Optional[dict]:
        table = self._table.get()
        names = dict(kwargs.pop("ExpressionAttributeNames", {}))
        names["#pk"] = self.key
        try:
            response = table.update_item(
                Key={self.key: key_value},
                ConditionExpression="attribute_exists(#pk)",
                ExpressionAttributeNames=names,
                ReturnValues="ALL_NEW",
                **kwargs,
            )
        except ClientError as exc:
            if exc.response["Error"]["Code"] == "ConditionalCheckFailedException":
                logger.warning("Update called for non-existent %s '%s'.", self.resource, key_value)
                return None
            logger.error("DynamoDB UpdateItem on '%s' failed for '%s': %s", self._table.name, key_value, exc)
            raise
        return response.get("Attributes")


class DynamoDBUserRepository(_DynamoDBRepository, UserRepository):
    resource = "users"

    def get(self, user_id: str) -> Optional[dict]:
        return self._get(user_id)

    def find_by_email(self, email: str) -> Optional[dict]:
        matches = self._scan(Attr("email").eq(email))
        return matches[0] if matches else None

    def find_by_username(self, username: str) -> Optional[dict]:
        matches = self._scan(Attr("username").eq(username))
        return matches[0] if matches else None


class DynamoDBDirectoryRepository(_DynamoDBRepository, DirectoryRepository):
    resource = "directories"

    def get(self, directory_id: str) -> Optional[dict]:
        return self._get(directory_id)

    def list_by_user(self, user_id: str) -> list[dict]:
        items = self._scan(Attr("user_id").eq(user_id))
        logger.info("Listed %d directory record(s) for user '%s'.", len(items), user_id)
        return items

    def update(self, directory_id: str, changes: dict) -> Optional[dict]:
        return self._update(directory_id, changes)


class DynamoDBSettingsRepository(_DynamoDBRepository, SettingsRepository):
    resource = "settings"
    key = "user_id"

    def get_by_user(self, user_id: str) -> Optional[dict]:
        return self._get(user_id)

    def update(self, user_id: str, changes: dict) -> Optional[dict]:
        return self._update(user_id, changes)


class DynamoDBProgressRepository(_DynamoDBRepository, ProgressRepository):
    resource = "progress"
    key = "user_id"

    def get_by_user(self, user_id: str) -> Optional[dict]:
        return self._get(user_id)

    def increment(self, user_id: str, field: str, amount: int, updated_at: str) -> Optional[dict]:
        # ADD is atomic on the server.
        return self._write_update(
            user_id,
            UpdateExpression="ADD #field :amount SET updated_at = :updated_at",
            ExpressionAttributeNames={"#field": field},
            ExpressionAttributeValues={":amount": amount, ":updated_at": updated_at},
        )
