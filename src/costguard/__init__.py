"""Cost Guard - cost controls for existing AWS projects.

This package inspects an AWS project, estimates a starting budget and
writes the cost-control configuration and deploy guardrails into it.
"""

__version__ = "1.0.0"

from .config import ConnectSettings, CostControlConfig
from .exceptions import CostGuardError, ProjectDetectionError
from .inspection import ProjectInspector, ProjectProfile

__all__ = [
    "ConnectSettings",
    "CostControlConfig",
    "CostGuardError",
    "ProjectDetectionError",
    "ProjectInspector",
    "ProjectProfile",
]
