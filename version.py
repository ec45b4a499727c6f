"""Version identifier for the Ground Markers plugin."""
from __future__ import annotations

import os
from typing import Optional

__all__ = ["__version__", "is_dev_build", "DEV_MODE_ENV_VAR"]

__version__ = "1.2.0"
DEV_MODE_ENV_VAR = "GROUND_MARKERS_DEV_MODE"

_TRUE_TOKENS = {"1", "true", "yes", "on"}
_FALSE_TOKENS = {"0", "false", "no", "off"}


def is_dev_build(version: Optional[str] = None) -> bool:
    """True when debug logging should be forced on.

    ``GROUND_MARKERS_DEV_MODE`` wins when set to a recognised boolean token;
    otherwise pre-release identifiers such as ``1.3.0-dev`` or ``1.3.dev4``
    count as dev builds.
    """

    override = (os.getenv(DEV_MODE_ENV_VAR) or "").strip().lower()
    if override in _TRUE_TOKENS:
        return True
    if override in _FALSE_TOKENS:
        return False
    identifier = (version or __version__).strip().lower()
    return "dev" in identifier.replace(".", "-").split("-") or ".dev" in identifier
