"""Run the API locally with auto-reload against the development config."""

import os

import uvicorn


def main() -> None:
    """Start uvicorn on the configured development host and port."""
    os.environ.setdefault("APP_ENV", "development")

    from recibook.core.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "recibook.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=True,
    )


if __name__ == "__main__":
    main()
