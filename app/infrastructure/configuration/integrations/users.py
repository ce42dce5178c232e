"""Users service integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class UsersServiceSettings(IntegrationSettings):
    """User directory (users service) configuration.

    Environment Variables:
        USERS_SERVICE_URL: Base URL of the users endpoint, e.g.
            http://users:3001/api/v1/users
        USERS_SERVICE_TIMEOUT_SECONDS: Request timeout for lookups (default: 5)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        url = settings.users.USERS_SERVICE_URL
        ```
    """

    USERS_SERVICE_URL: str = Field(
        default="http://localhost:3001/api/v1/users", alias="USERS_SERVICE_URL"
    )
    USERS_SERVICE_TIMEOUT_SECONDS: float = Field(
        default=5.0, alias="USERS_SERVICE_TIMEOUT_SECONDS"
    )
