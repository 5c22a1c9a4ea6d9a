"""Azure Functions v2 programming model entry point."""

from __future__ import annotations

import logging

from app import app

logging.getLogger(__name__).debug("Function app loaded with validation routes.")

__all__ = ["app"]
