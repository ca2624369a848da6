"""In-memory project profile produced by the inspector."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class ProjectType(str, Enum):
    """Project types, listed in detection priority order."""

    CDK_TYPESCRIPT = "cdk-typescript"
    NODEJS_AWS = "nodejs-aws"
    NODEJS = "nodejs"
    JAVA_MAVEN = "java-maven"
    PYTHON = "python"
    GOLANG = "golang"
    RUST = "rust"
    UNKNOWN = "unknown"


class InfrastructurePattern(str, Enum):
    """Infrastructure-as-code toolchains recognized by marker file or content."""

    AWS_CDK = "aws-cdk"
    CLOUDFORMATION = "cloudformation"
    TERRAFORM = "terraform"
    SERVERLESS = "serverless"


NO_INFRASTRUCTURE = "none-detected"


def format_patterns(patterns: List[InfrastructurePattern]) -> str:
    """Render detected patterns as a display string."""
    if not patterns:
        return NO_INFRASTRUCTURE
    return ", ".join(p.value for p in patterns)


@dataclass(frozen=True)
class ResourceMention:
    """A known cloud-resource declaration found in a source or config file."""
    category: str
    file: str


@dataclass
class ProjectProfile:
    """Best-effort description of the inspected project."""
    root: str
    project_type: ProjectType
    infrastructure_patterns: List[InfrastructurePattern] = field(default_factory=list)
    resource_mentions: List[ResourceMention] = field(default_factory=list)
    budget_estimate_usd: int = 100
    project_name: str = ""
    alert_email: str = ""

    @property
    def infrastructure(self) -> str:
        return format_patterns(self.infrastructure_patterns)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "projectType": self.project_type.value,
            "infrastructure": self.infrastructure,
            "infrastructurePatterns": [p.value for p in self.infrastructure_patterns],
            "resourceMentions": [
                {"type": m.category, "file": m.file} for m in self.resource_mentions
            ],
            "budgetEstimate": self.budget_estimate_usd,
            "projectName": self.project_name,
            "alertEmail": self.alert_email,
        }
