"""AWS DynamoDB resource binding"""

from typing import Any, Optional

import boto3

from infrastructure.configuration.integrations import AwsSettings
from infrastructure.logging import get_module_logger

logger = get_module_logger()


def get_dynamodb_table(
    settings: AwsSettings,
    table_name: str,
    session: Optional[boto3.session.Session] = None,
) -> Any:
    """Bind a DynamoDB table resource.

    Args:
        settings: AWS settings (region and optional endpoint override)
        table_name: Name of the table
        session: Optional boto3 session, a fresh one by default

    Returns:
        boto3 ``dynamodb.Table`` resource
    """
    client_config = dict(
        region_name=settings.AWS_REGION,
    )
    if settings.DYNAMODB_ENDPOINT_URL:
        client_config["endpoint_url"] = settings.DYNAMODB_ENDPOINT_URL

    session = session or boto3.session.Session()
    table = session.resource("dynamodb", **client_config).Table(table_name)
    logger.debug(
        "dynamodb_table_bound",
        table=table_name,
        region=settings.AWS_REGION,
        endpoint_url=settings.DYNAMODB_ENDPOINT_URL,
    )
    return table
