"""Project inspection: type, infrastructure, resources and identity detection."""

from .inspector import ProjectInspector, inspect_project
from .profile import InfrastructurePattern, ProjectProfile, ProjectType, ResourceMention

__all__ = [
    "InfrastructurePattern",
    "ProjectInspector",
    "ProjectProfile",
    "ProjectType",
    "ResourceMention",
    "inspect_project",
]
