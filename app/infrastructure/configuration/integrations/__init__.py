"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.aws import AwsSettings
from infrastructure.configuration.integrations.mailer import MailerSettings
from infrastructure.configuration.integrations.users import UsersServiceSettings

__all__ = [
    "AwsSettings",
    "MailerSettings",
    "UsersServiceSettings",
]
