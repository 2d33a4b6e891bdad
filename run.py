import uvicorn

from taskmanager.config import get_settings
from taskmanager.main import create_app


def main():
    settings = get_settings()
    server = uvicorn.Server(
        config=uvicorn.Config(
            app=create_app(settings),
            host="0.0.0.0",
            port=settings.port,
            log_level=settings.log_level.lower()
        )
    )
    server.run()


if __name__ == "__main__":
    main()
