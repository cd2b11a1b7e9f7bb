import logging
from decimal import Decimal
from typing import Any, Generic, List, Optional, Type

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from cashminder.core.config import settings
from cashminder.core.exceptions import RepositoryError
from cashminder.db.repository import ModelT, Query
from cashminder.models.query import OwnerQuery

logger = logging.getLogger(__name__)


def get_table(table_name: str, region: Optional[str] = None):
    dynamodb = boto3.resource("dynamodb", region_name=region or settings.DYNAMO_REGION)
    return dynamodb.Table(table_name)


class DynamoRepository(Generic[ModelT]):
    """
    Repository over a single DynamoDB table whose partition key is ``id``.
    Owner filtering is pushed down as a scan filter; the remaining query
    semantics (type, dates, ordering, limit) are applied on the loaded page set.
    """

    def __init__(self, table, model: Type[ModelT], key: str = "id") -> None:
        self.table = table
        self.model = model
        self.key = key

    def get(self, record_id: str) -> Optional[ModelT]:
        try:
            response = self.table.get_item(Key={self.key: record_id})
        except ClientError as e:
            raise self._error("get", e)
        item = response.get("Item")
        return self.model.model_validate(_from_dynamo(item)) if item else None

    def list(self, query: Optional[Query] = None) -> List[ModelT]:
        scan_kwargs = {}
        if query is not None:
            owner = Attr("user_id").eq(query.user_id)
            if isinstance(query, OwnerQuery) and query.include_shared:
                owner = owner | Attr("user_id").not_exists()
            scan_kwargs["FilterExpression"] = owner

        items = []
        try:
            while True:
                response = self.table.scan(**scan_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            raise self._error("list", e)

        records = [self.model.model_validate(_from_dynamo(item)) for item in items]
        return query.apply(records) if query is not None else records

    def save(self, record: ModelT) -> ModelT:
        item = record.model_dump(mode="json", exclude_none=True)
        try:
            self.table.put_item(Item=_convert_for_dynamo(item))
        except ClientError as e:
            raise self._error("save", e)
        return record

    def delete(self, record_id: str) -> bool:
        try:
            response = self.table.delete_item(
                Key={self.key: record_id},
                ReturnValues="ALL_OLD",
            )
        except ClientError as e:
            raise self._error("delete", e)
        return "Attributes" in response

    def _error(self, operation: str, e: ClientError) -> RepositoryError:
        message = e.response.get("Error", {}).get("Message", str(e))
        logger.error(f"{self.model.__name__} {operation} failed: {message}")
        return RepositoryError(f"{self.model.__name__} {operation} failed: {message}")


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal for DynamoDB compatibility.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj
