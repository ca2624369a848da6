"""Infrastructure-as-code toolchain detection."""

from __future__ import annotations

import logging
import re
from typing import List

from .files import any_file_matches, exists
from .profile import InfrastructurePattern

logger = logging.getLogger(__name__)

CDK_SOURCE = re.compile(r"Stack|Construct")
CLOUDFORMATION_MARKER = re.compile(r"AWSTemplateFormatVersion")


def _uses_cdk(root: str) -> bool:
    return exists(root, "cdk.json") or any_file_matches(root, "*.ts", CDK_SOURCE)


def _uses_cloudformation(root: str) -> bool:
    return any(
        any_file_matches(root, pattern, CLOUDFORMATION_MARKER)
        for pattern in ("*.yaml", "*.yml", "*.json")
    )


def _uses_terraform(root: str) -> bool:
    return any_file_matches(root, "*.tf") or exists(root, "terraform.tfstate")


def _uses_serverless(root: str) -> bool:
    return exists(root, "serverless.yml", "serverless.yaml")


CHECKS = (
    (InfrastructurePattern.AWS_CDK, _uses_cdk),
    (InfrastructurePattern.CLOUDFORMATION, _uses_cloudformation),
    (InfrastructurePattern.TERRAFORM, _uses_terraform),
    (InfrastructurePattern.SERVERLESS, _uses_serverless),
)


def detect_infrastructure_patterns(root: str) -> List[InfrastructurePattern]:
    """Run every check independently and return the patterns that matched."""
    patterns = []
    for pattern, check in CHECKS:
        if check(root):
            logger.debug(f"Infrastructure pattern detected: {pattern.value}")
            patterns.append(pattern)
    return patterns
