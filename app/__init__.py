"""Application package exposing the shared FunctionApp instance.

The FunctionApp is configured with FUNCTION-level authentication so every
validation endpoint requires a function key unless a route explicitly opts
out (rule listings and API documentation are anonymous).
"""

from __future__ import annotations

import azure.functions as func

app = func.FunctionApp(http_auth_level=func.AuthLevel.FUNCTION)

# Import route modules so decorators execute at import time
from .routes import docs as _docs_routes  # noqa: F401
from .routes import rules as _rules_routes  # noqa: F401
from .routes import validate as _validate_routes  # noqa: F401

__all__ = ["app"]
