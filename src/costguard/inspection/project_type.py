"""Project type classification from marker files."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Tuple

from ..exceptions import ProjectDetectionError
from .files import MANIFEST_FILE, exists, load_manifest
from .profile import ProjectType

logger = logging.getLogger(__name__)

# At least one of these must exist for the directory to count as a project
PROJECT_ROOT_MARKERS: Tuple[str, ...] = (MANIFEST_FILE, "pom.xml", "requirements.txt")

# Non-Node marker files, in priority order
MARKER_FILES: Tuple[Tuple[str, ProjectType], ...] = (
    ("pom.xml", ProjectType.JAVA_MAVEN),
    ("requirements.txt", ProjectType.PYTHON),
    ("go.mod", ProjectType.GOLANG),
    ("Cargo.toml", ProjectType.RUST),
)

CDK_DEPENDENCY = "aws-cdk-lib"
AWS_SDK_DEPENDENCY = "aws-sdk"


def ensure_project_root(root: str) -> None:
    """Raise ProjectDetectionError unless ``root`` holds a recognizable manifest."""
    if not exists(root, *PROJECT_ROOT_MARKERS):
        raise ProjectDetectionError(
            "No package.json, pom.xml, or requirements.txt found. "
            "Please run this in your project root.",
            path=os.path.abspath(root),
            error_code="NO_PROJECT",
        )


def classify_project_type(root: str, manifest: Optional[Dict[str, Any]] = None) -> ProjectType:
    """Classify the project, first match wins.

    Args:
        root: Project directory
        manifest: Pre-parsed ``package.json``; loaded from ``root`` when omitted

    Returns:
        Detected project type
    """
    if exists(root, MANIFEST_FILE):
        if manifest is None:
            manifest = load_manifest(root)
        dependencies = (manifest or {}).get("dependencies")
        if isinstance(dependencies, dict):
            if CDK_DEPENDENCY in dependencies:
                return ProjectType.CDK_TYPESCRIPT
            if AWS_SDK_DEPENDENCY in dependencies:
                return ProjectType.NODEJS_AWS
        return ProjectType.NODEJS

    for marker, project_type in MARKER_FILES:
        if exists(root, marker):
            logger.debug(f"Found {marker}, project type {project_type.value}")
            return project_type

    return ProjectType.UNKNOWN
