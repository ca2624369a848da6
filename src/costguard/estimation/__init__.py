"""Template cost estimation and pre-deployment guardrails."""

from .costs import BudgetCheck, estimate_basic_costs, estimate_resource_cost, validate_budget
from .guardrails import DeploymentValidation, Violation, apply_required_tags, validate_deployment
from .templates import find_default_template, load_template

__all__ = [
    "BudgetCheck",
    "DeploymentValidation",
    "Violation",
    "apply_required_tags",
    "estimate_basic_costs",
    "estimate_resource_cost",
    "find_default_template",
    "load_template",
    "validate_budget",
    "validate_deployment",
]
