"""
Run the API with uvicorn: ``python -m attendhub``.
"""

from __future__ import annotations

import logging

import uvicorn

from attendhub.config import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    logging.getLogger(__name__).info(
        "Attendance API listening on http://%s:%d (health: /health)",
        settings.host,
        settings.port,
    )
    uvicorn.run("attendhub.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
