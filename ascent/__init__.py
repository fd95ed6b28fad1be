"""ascent: goal graph, actionable task queue and day projection.

Public API:
  - import from `ascent.api` (preferred) or `import ascent` (re-export)
"""

from __future__ import annotations

from .api import *  # noqa: F401,F403
from . import api as _api

__all__ = list(_api.__all__)
