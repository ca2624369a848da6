"""Pre-deployment guardrails for CloudFormation templates.

Checks each resource against the environment's resource limits, sums the
estimated monthly cost and compares it with the project budget. Also adds
the mandatory cost-allocation tags to taggable resources.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from ..config import CostControlConfig, ResourceLimits
from .costs import estimate_resource_cost, threshold_warnings

logger = logging.getLogger(__name__)

MANAGED_BY = "aws-cost-guard"

TAGGABLE_TYPES = {
    "AWS::EC2::Instance",
    "AWS::RDS::DBInstance",
    "AWS::S3::Bucket",
    "AWS::Lambda::Function",
    "AWS::ECS::Service",
}

RECOMMENDATION_BUDGET_RATIO = 0.8
DEV_AUTO_SHUTDOWN_THRESHOLD = 50


@dataclass
class Violation:
    """A guardrail violation."""
    type: str
    message: str
    resource_id: Optional[str] = None


@dataclass
class DeploymentValidation:
    """Result of validating a template against the cost-control config."""
    is_valid: bool
    estimated_cost: float
    budget: float
    violations: List[Violation] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    resource_costs: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def validate_resource(
    resource_id: str,
    resource: Mapping[str, Any],
    limits: ResourceLimits,
) -> Optional[Violation]:
    """Check a single resource against the environment's limits."""
    resource_type = resource.get("Type")
    properties = resource.get("Properties") or {}

    if resource_type == "AWS::EC2::Instance":
        instance_type = properties.get("InstanceType")
        if isinstance(instance_type, str) and instance_type not in limits.max_instance_types:
            return Violation(
                type="INVALID_INSTANCE_TYPE",
                resource_id=resource_id,
                message=(
                    f"Instance type '{instance_type}' not allowed. "
                    f"Use: {', '.join(limits.max_instance_types)}"
                ),
            )

    if resource_type == "AWS::EC2::Volume":
        size = properties.get("Size")
        if isinstance(size, (int, float)) and size > limits.max_volume_size:
            return Violation(
                type="VOLUME_TOO_LARGE",
                resource_id=resource_id,
                message=f"EBS volume size {size}GB exceeds limit of {limits.max_volume_size}GB",
            )

    return None


def generate_recommendations(estimated_cost: float, config: CostControlConfig) -> List[str]:
    recommendations = []
    if estimated_cost > config.budget * RECOMMENDATION_BUDGET_RATIO:
        recommendations.append("Consider using smaller instance types or reducing resource count")
    if config.environment == "dev" and estimated_cost > DEV_AUTO_SHUTDOWN_THRESHOLD:
        recommendations.append("Enable auto-shutdown for development resources")
    return recommendations


def validate_deployment(template: Mapping[str, Any], config: CostControlConfig) -> DeploymentValidation:
    """Validate a parsed template for cost compliance.

    Args:
        template: Parsed CloudFormation template
        config: Cost-control configuration of the project

    Returns:
        Validation result with violations, per-resource costs and recommendations
    """
    resources = template.get("Resources") or {}
    violations: List[Violation] = []
    resource_costs: Dict[str, float] = {}

    for resource_id, resource in resources.items():
        if not isinstance(resource, Mapping):
            logger.debug(f"Skipping malformed resource {resource_id}")
            continue
        resource_costs[resource_id] = estimate_resource_cost(resource, config.environment)
        violation = validate_resource(resource_id, resource, config.resource_limits)
        if violation:
            violations.append(violation)

    estimated_cost = round(sum(resource_costs.values()), 2)

    if estimated_cost > config.budget:
        violations.append(
            Violation(
                type="BUDGET_EXCEEDED",
                message=f"Estimated cost (${estimated_cost:.2f}) exceeds budget (${config.budget})",
            )
        )

    logger.info(
        f"Validated {len(resource_costs)} resources: ${estimated_cost:.2f}/month, "
        f"{len(violations)} violations"
    )
    return DeploymentValidation(
        is_valid=not violations,
        estimated_cost=estimated_cost,
        budget=config.budget,
        violations=violations,
        recommendations=generate_recommendations(estimated_cost, config),
        warnings=threshold_warnings(estimated_cost, config.environment),
        resource_costs=resource_costs,
    )


def required_tags(config: CostControlConfig, creation_date: Optional[date] = None) -> Dict[str, str]:
    return {
        "Project": config.project_name,
        "Environment": config.environment,
        "CostCenter": config.cost_center,
        "Owner": config.owner,
        "ManagedBy": MANAGED_BY,
        "CreationDate": (creation_date or date.today()).isoformat(),
    }


def apply_required_tags(
    resources: Dict[str, Any],
    config: CostControlConfig,
    creation_date: Optional[date] = None,
) -> Dict[str, Any]:
    """Add missing mandatory tags to every taggable resource, in place.

    Existing tag keys are never overwritten.

    Returns:
        The same ``resources`` mapping
    """
    tags = required_tags(config, creation_date)
    for resource_id, resource in resources.items():
        if not isinstance(resource, dict) or resource.get("Type") not in TAGGABLE_TYPES:
            continue
        properties = resource.get("Properties") or {}
        resource["Properties"] = properties
        existing = properties.get("Tags") or []
        properties["Tags"] = existing
        present = {tag.get("Key") for tag in existing if isinstance(tag, dict)}
        for key, value in tags.items():
            if key not in present:
                existing.append({"Key": key, "Value": value})
        logger.debug(f"Tagged {resource_id}")
    return resources
