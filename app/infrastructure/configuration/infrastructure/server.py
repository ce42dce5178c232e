"""Server infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """HTTP server and public URL configuration.

    Environment Variables:
        NOTIFICATIONS_SERVICE_URL: Public base URL of this service, used to
            build email open tracking links (default: http://127.0.0.1:8000)
        HOST: Bind address for uvicorn (default: 0.0.0.0)
        PORT: Bind port for uvicorn (default: 8000)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        base_url = settings.server.NOTIFICATIONS_SERVICE_URL
        ```
    """

    NOTIFICATIONS_SERVICE_URL: str = Field(
        default="http://127.0.0.1:8000", alias="NOTIFICATIONS_SERVICE_URL"
    )
    HOST: str = Field(default="0.0.0.0", alias="HOST")
    PORT: int = Field(default=8000, alias="PORT")
