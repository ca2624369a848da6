"""Rough monthly cost estimates for CloudFormation resources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

EC2_HOURLY_RATES: Dict[str, float] = {
    "t3.micro": 0.0104,
    "t3.small": 0.0208,
    "t3.medium": 0.0416,
    "t3.large": 0.0832,
}

RDS_HOURLY_RATES: Dict[str, float] = {
    "db.t3.micro": 0.017,
    "db.t3.small": 0.034,
    "db.t3.medium": 0.068,
}

DEFAULT_HOURLY_RATE = 0.02
RDS_STORAGE_GB_MONTH = 0.115
RDS_DEFAULT_STORAGE_GB = 20
S3_BUCKET_MONTHLY = 5.0
LOAD_BALANCER_MONTHLY = 20.0

PROD_HOURS_PER_MONTH = 730
NONPROD_HOURS_PER_MONTH = 300

# Text heuristic used when no template can be parsed
BASIC_COSTS: Tuple[Tuple[str, float], ...] = (
    ("AWS::EC2::Instance", 50),
    ("AWS::RDS::DBInstance", 100),
    ("AWS::Lambda::Function", 5),
    ("AWS::S3::Bucket", 10),
)
MINIMUM_BASIC_ESTIMATE = 10

# (monthly, daily) alert thresholds in USD
ENVIRONMENT_THRESHOLDS: Dict[str, Tuple[float, float]] = {
    "dev": (50, 5),
    "staging": (200, 10),
    "qa": (150, 7),
    "prod": (1000, 50),
}


def hours_per_month(environment: str) -> int:
    """Non-prod resources are assumed to run part-time."""
    return PROD_HOURS_PER_MONTH if environment == "prod" else NONPROD_HOURS_PER_MONTH


def _number(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _hourly_rate(rates: Dict[str, float], value: Any, default_type: str) -> float:
    # Parameter references ({"Ref": ...}) price as the default type
    if not isinstance(value, str) or not value:
        value = default_type
    return rates.get(value, DEFAULT_HOURLY_RATE)


def estimate_resource_cost(resource: Mapping[str, Any], environment: str = "dev") -> float:
    """Estimate the monthly cost of a single template resource.

    Args:
        resource: Template resource with ``Type`` and optional ``Properties``
        environment: Target environment; prod is billed around the clock

    Returns:
        Estimated monthly cost in USD (0 for unpriced resource types)
    """
    resource_type = resource.get("Type")
    properties = resource.get("Properties") or {}

    if resource_type == "AWS::EC2::Instance":
        rate = _hourly_rate(EC2_HOURLY_RATES, properties.get("InstanceType"), "t3.micro")
        return rate * hours_per_month(environment)

    if resource_type == "AWS::RDS::DBInstance":
        rate = _hourly_rate(RDS_HOURLY_RATES, properties.get("DBInstanceClass"), "db.t3.micro")
        storage = _number(properties.get("AllocatedStorage") or RDS_DEFAULT_STORAGE_GB, RDS_DEFAULT_STORAGE_GB)
        return rate * hours_per_month(environment) + storage * RDS_STORAGE_GB_MONTH

    if resource_type == "AWS::S3::Bucket":
        return S3_BUCKET_MONTHLY

    if resource_type == "AWS::ElasticLoadBalancingV2::LoadBalancer":
        return LOAD_BALANCER_MONTHLY

    return 0.0


def estimate_basic_costs(template_text: str) -> float:
    """Keyword-based estimate for raw template text, with a $10 floor."""
    estimate = sum(cost for marker, cost in BASIC_COSTS if marker in template_text)
    return max(estimate, MINIMUM_BASIC_ESTIMATE)


@dataclass
class BudgetCheck:
    """Outcome of comparing an estimate to a budget."""
    is_valid: bool
    estimated_cost: float
    budget_limit: float
    message: str


def validate_budget(estimated_cost: float, budget_limit: float) -> BudgetCheck:
    """Compare an estimated monthly cost against the budget."""
    if estimated_cost > budget_limit:
        message = f"Estimated cost ${estimated_cost:.2f} exceeds budget ${budget_limit:.2f}"
    else:
        message = f"Within budget: ${estimated_cost:.2f}/${budget_limit:.2f}"
    return BudgetCheck(
        is_valid=estimated_cost <= budget_limit,
        estimated_cost=estimated_cost,
        budget_limit=budget_limit,
        message=message,
    )


def threshold_warnings(monthly_cost: float, environment: str) -> list[str]:
    """Warnings for estimates above the environment's alert thresholds."""
    monthly_limit, daily_limit = ENVIRONMENT_THRESHOLDS.get(environment, ENVIRONMENT_THRESHOLDS["dev"])
    daily_cost = monthly_cost / 30
    warnings = []
    if monthly_cost > monthly_limit:
        warnings.append(f"Monthly cost ${monthly_cost:.2f} exceeds {environment} threshold ${monthly_limit:.2f}")
    if daily_cost > daily_limit:
        warnings.append(f"Daily cost ${daily_cost:.2f} exceeds {environment} threshold ${daily_limit:.2f}")
    return warnings
