from __future__ import annotations

"""Root logging setup shared by tools and host applications."""

import logging

from study_assistant.app.settings import settings


def configure_logging(level_name: str | None = None) -> None:
    """Configure root logging using environment settings."""
    resolved = (level_name or settings.log_level).strip().upper()
    level = getattr(logging, resolved, logging.INFO)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
    logging.getLogger("study_assistant").setLevel(level)
