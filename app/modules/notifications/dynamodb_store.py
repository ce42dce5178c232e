"""DynamoDB-backed notification store for multi-instance deployments.

Table Schema:
    PK: id (String)
    Attributes: user_id, email, type, content, priority, metadata,
                email_sent, read, sent_at, created_at
    GSI: user_id-created_at-index (user_id + created_at)

Timestamps are stored as ISO-8601 strings so ``created_at`` sorts
lexicographically within the GSI.
"""

import json
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr, Key  # type: ignore
from botocore.exceptions import ClientError  # type: ignore

from infrastructure.logging import get_module_logger
from infrastructure.operations import classify_aws_error
from modules.notifications.models import Notification, NotificationUpdate, utc_now
from modules.notifications.store import NotificationFilter, NotificationNotFoundError

logger = get_module_logger()

USER_INDEX_NAME = "user_id-created_at-index"


def _decimal_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _to_item(notification: Notification) -> Dict[str, Any]:
    """Serialize to a DynamoDB item (floats as Decimal, None attributes dropped)."""
    data = json.loads(notification.model_dump_json(), parse_float=Decimal)
    return {k: v for k, v in data.items() if v is not None}


def _from_item(item: Dict[str, Any]) -> Notification:
    return Notification.model_validate(json.loads(json.dumps(item, default=_decimal_default)))


def _to_dynamo_value(value: Any) -> Any:
    return json.loads(json.dumps(value, default=str), parse_float=Decimal)


class DynamoDBNotificationStore:
    """Notification store on a DynamoDB table.

    Args:
        table: boto3 ``dynamodb.Table`` resource
    """

    def __init__(self, table: Any) -> None:
        self.table = table
        logger.info("dynamodb_notification_store_initialized", table_name=table.name)

    def create(self, notification: Notification) -> Notification:
        record = notification.model_copy(
            update={"id": uuid.uuid4().hex, "created_at": utc_now()}, deep=True
        )
        try:
            self.table.put_item(
                Item=_to_item(record),
                ConditionExpression=Attr("id").not_exists(),
            )
        except ClientError as exc:
            result = classify_aws_error(exc)
            logger.error(
                "dynamodb_put_failed",
                user_id=record.user_id,
                error_code=result.error_code,
                retryable=result.is_retryable,
            )
            raise
        logger.debug(
            "notification_created",
            notification_id=record.id,
            user_id=record.user_id,
            type=record.type.value,
        )
        return record

    def get(self, notification_id: str) -> Optional[Notification]:
        response = self.table.get_item(Key={"id": notification_id})
        item = response.get("Item")
        return _from_item(item) if item else None

    def _filter_expression(self, criteria: NotificationFilter, skip_user: bool):
        conditions = []
        if criteria.user_id is not None and not skip_user:
            conditions.append(Attr("user_id").eq(criteria.user_id))
        if criteria.type is not None:
            conditions.append(Attr("type").eq(criteria.type.value))
        if criteria.priority is not None:
            conditions.append(Attr("priority").eq(criteria.priority.value))
        if criteria.read is not None:
            conditions.append(Attr("read").eq(criteria.read))
        if criteria.email_sent is not None:
            conditions.append(Attr("email_sent").eq(criteria.email_sent))
        if criteria.unsent_only:
            conditions.append(Attr("sent_at").not_exists())
        if criteria.tracking_id is not None:
            conditions.append(Attr("metadata.trackingId").eq(criteria.tracking_id))
        if criteria.ids is not None:
            conditions.append(Attr("id").is_in(list(criteria.ids)))

        expression = None
        for condition in conditions:
            expression = condition if expression is None else expression & condition
        return expression

    def _collect(self, criteria: NotificationFilter) -> List[Dict[str, Any]]:
        """Read every matching item, following pagination."""
        use_index = criteria.user_id is not None
        params: Dict[str, Any] = {}
        expression = self._filter_expression(criteria, skip_user=use_index)
        if expression is not None:
            params["FilterExpression"] = expression
        if use_index:
            params["IndexName"] = USER_INDEX_NAME
            params["KeyConditionExpression"] = Key("user_id").eq(criteria.user_id)

        operation = self.table.query if use_index else self.table.scan
        items: List[Dict[str, Any]] = []
        while True:
            response = operation(**params)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            params["ExclusiveStartKey"] = last_key
        return items

    def find(
        self,
        criteria: NotificationFilter,
        limit: Optional[int] = None,
        offset: int = 0,
        newest_first: bool = False,
    ) -> List[Notification]:
        records = [_from_item(item) for item in self._collect(criteria)]
        records.sort(key=lambda r: r.created_at, reverse=newest_first)
        end = offset + limit if limit is not None else None
        return records[offset:end]

    def count(self, criteria: NotificationFilter) -> int:
        return len(self._collect(criteria))

    def update(self, notification_id: str, update: NotificationUpdate) -> Notification:
        assignments: List[str] = []
        names: Dict[str, str] = {}
        values: Dict[str, Any] = {}

        if update.read is not None:
            assignments.append("#read = :read")
            names["#read"] = "read"
            values[":read"] = update.read
        if update.email_sent is not None:
            assignments.append("#email_sent = :email_sent")
            names["#email_sent"] = "email_sent"
            values[":email_sent"] = update.email_sent
        if update.sent_at is not None:
            assignments.append("#sent_at = :sent_at")
            names["#sent_at"] = "sent_at"
            values[":sent_at"] = update.sent_at.isoformat()
        if update.metadata:
            names["#metadata"] = "metadata"
            for index, (key, value) in enumerate(update.metadata.items()):
                assignments.append(f"#metadata.#m{index} = :m{index}")
                names[f"#m{index}"] = key
                values[f":m{index}"] = _to_dynamo_value(value)

        if not assignments:
            current = self.get(notification_id)
            if current is None:
                raise NotificationNotFoundError(notification_id)
            return current

        try:
            response = self.table.update_item(
                Key={"id": notification_id},
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression=Attr("id").exists(),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise NotificationNotFoundError(notification_id) from exc
            result = classify_aws_error(exc)
            logger.error(
                "dynamodb_update_failed",
                notification_id=notification_id,
                error_code=result.error_code,
                retryable=result.is_retryable,
            )
            raise

        logger.debug(
            "notification_updated",
            notification_id=notification_id,
            fields=sorted(update.model_dump(exclude_defaults=True).keys()),
        )
        return _from_item(response["Attributes"])
