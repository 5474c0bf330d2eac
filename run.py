"""Entry point for serving the Meals Finder API.

Host and port are read from the ``API_HOST`` and ``API_PORT``
environment variables (defaults ``0.0.0.0`` and ``8000``).  All other
configuration (``SECRET_KEY``, ``DATABASE_URL``, ...) is read by
``meals_finder_api.app.core.config`` and may be placed in a ``.env``
file in the working directory.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from meals_finder_api.app.main import app


async def main() -> None:
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Shutting down")
