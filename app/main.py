import uvicorn
from dotenv import load_dotenv

load_dotenv()

from infrastructure.services import get_settings  # noqa: E402
from server import server  # noqa: E402

server_app = server.handler


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "main:server_app",
        host=settings.server.HOST,
        port=settings.server.PORT,
        log_config=None,
    )
