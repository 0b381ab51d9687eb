"""Application entry point.

Usage:
    # Development with auto-reload
    uvicorn recibook.main:app --reload
"""

from recibook.factory import create_app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    from recibook.core.config import get_settings

    settings = get_settings()

    uvicorn.run(
        "recibook.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.is_development,
        log_level=settings.logging.level.lower(),
    )
