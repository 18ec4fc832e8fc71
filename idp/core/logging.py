"""
Logging utilities for the Lambda entry point and the local FastAPI app.

Provides a consistent logging format and configuration.
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.getLogger("botocore").setLevel(logging.WARNING)

    root = logging.getLogger()
    if root.handlers:
        # The Lambda runtime installs its own handler.
        root.setLevel(level.upper())
        return
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


__all__ = ["configure_logging"]
