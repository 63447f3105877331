#!/usr/bin/env python3
"""
Server entry point for the Timesense API.
"""
import uvicorn

from timesense_api.config import settings, logger


def main():
    """Run the server."""
    logger.info(f"Starting Timesense on {settings.HOST}:{settings.PORT}")

    uvicorn.run(
        "timesense_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
