"""Default monthly budget heuristic."""

from __future__ import annotations

from typing import Sequence

from .profile import ResourceMention
from .resources import LOAD_BALANCERS, RDS_DATABASES

BASE_BUDGET_USD = 100
LARGE_PROJECT_MENTIONS = 10
LARGE_PROJECT_SURCHARGE = 100
DATABASE_SURCHARGE = 50
LOAD_BALANCER_SURCHARGE = 30


def estimate_default_budget(mentions: Sequence[ResourceMention]) -> int:
    """Estimate a starting monthly budget (USD) from resource mentions.

    Args:
        mentions: Resource mentions found by the scanner

    Returns:
        Budget in whole dollars, never below ``BASE_BUDGET_USD``
    """
    budget = BASE_BUDGET_USD

    if len(mentions) > LARGE_PROJECT_MENTIONS:
        budget += LARGE_PROJECT_SURCHARGE
    if any(m.category == RDS_DATABASES for m in mentions):
        budget += DATABASE_SURCHARGE
    if any(m.category == LOAD_BALANCERS for m in mentions):
        budget += LOAD_BALANCER_SURCHARGE

    return budget
