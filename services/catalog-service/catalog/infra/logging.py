# services/catalog-service/catalog/infra/logging.py
from __future__ import annotations

import logging

from catalog.config import settings

_LEVELS: dict[str, int] = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def setup_logging(service_name: str = "catalog-service", level_name: str | None = None) -> None:
    """
    Minimal, consistent structured-ish logging for the API process and the seed CLI.
    """
    level = _LEVELS.get((level_name or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=(
            "%(asctime)s | %(levelname)s | %(name)s | "
            f"svc={service_name} | %(message)s"
        ),
    )
    # quiet noisy deps
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
