"""Project inspector: builds a ProjectProfile in one sequential pass."""

from __future__ import annotations

import logging
import os
from typing import Optional

from .budget import estimate_default_budget
from .files import load_manifest
from .identity import GitConfigReader, make_git_config_reader, resolve_alert_email, resolve_project_name
from .infrastructure import detect_infrastructure_patterns
from .profile import ProjectProfile
from .project_type import classify_project_type, ensure_project_root
from .resources import scan_resource_mentions

logger = logging.getLogger(__name__)


class ProjectInspector:
    """Classifies a project directory and guesses cost-control defaults."""

    def __init__(self, root: str = ".", git_config: Optional[GitConfigReader] = None):
        """Initialize the inspector.

        Args:
            root: Project directory to inspect
            git_config: Optional ``git config --get`` reader (for DI/testing)
        """
        self.root = os.path.abspath(root)
        self.git_config = git_config or make_git_config_reader(self.root)

    def inspect(self) -> ProjectProfile:
        """Inspect the project.

        Returns:
            Fully populated profile

        Raises:
            ProjectDetectionError: If no recognizable project manifest exists
        """
        ensure_project_root(self.root)

        manifest = load_manifest(self.root)

        project_type = classify_project_type(self.root, manifest)
        logger.info(f"Detected project type: {project_type.value}")

        patterns = detect_infrastructure_patterns(self.root)
        mentions = scan_resource_mentions(self.root)

        profile = ProjectProfile(
            root=self.root,
            project_type=project_type,
            infrastructure_patterns=patterns,
            resource_mentions=mentions,
            budget_estimate_usd=estimate_default_budget(mentions),
            project_name=resolve_project_name(self.root, manifest, self.git_config),
            alert_email=resolve_alert_email(manifest, self.git_config),
        )
        logger.info(
            f"Inspection complete: {profile.project_name} "
            f"({profile.infrastructure}, ${profile.budget_estimate_usd}/month)"
        )
        return profile


def inspect_project(root: str = ".", git_config: Optional[GitConfigReader] = None) -> ProjectProfile:
    """Convenience wrapper around ``ProjectInspector(root).inspect()``."""
    return ProjectInspector(root, git_config=git_config).inspect()
