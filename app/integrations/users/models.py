"""User directory models."""

from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DISPLAY_NAME = "Valued Customer"


def is_valid_email(email: Optional[str]) -> bool:
    """Syntactic email check used before any dispatch.

    Deliverability (DNS) is not checked.
    """
    if not email or not isinstance(email, str):
        return False
    try:
        validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class UserPreferences(BaseModel):
    """Notification preferences.

    A preference only opts a user out when it is explicitly ``False``; a
    missing value means the user receives the notification.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    promotions: Optional[bool] = None
    order_updates: Optional[bool] = Field(default=None, alias="orderUpdates")
    recommendations: Optional[bool] = None

    @property
    def promotions_opted_out(self) -> bool:
        return self.promotions is False

    @property
    def recommendations_opted_out(self) -> bool:
        return self.recommendations is False


class User(BaseModel):
    """A user as returned by the users service."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(alias="_id")
    email: Optional[str] = None
    name: Optional[str] = None
    preferences: UserPreferences = Field(default_factory=UserPreferences)

    @property
    def display_name(self) -> str:
        return self.name or DEFAULT_DISPLAY_NAME

    @property
    def has_valid_email(self) -> bool:
        return is_valid_email(self.email)
