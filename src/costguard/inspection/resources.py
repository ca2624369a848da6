"""Scan source and config files for cloud-resource declarations."""

from __future__ import annotations

import logging
import os
import re
from typing import Dict, List, Pattern, Tuple

from .files import read_text, walk_files
from .profile import ResourceMention

logger = logging.getLogger(__name__)

RDS_DATABASES = "RDS Databases"
LOAD_BALANCERS = "Load Balancers"

# CloudFormation type names and CDK call-style spellings
RESOURCE_PATTERNS: Dict[str, Pattern[str]] = {
    "EC2 Instances": re.compile(r"AWS::EC2::Instance|new ec2\.Instance|EC2\.Instance"),
    RDS_DATABASES: re.compile(r"AWS::RDS::DBInstance|new rds\.Database|RDS\.Database"),
    "S3 Buckets": re.compile(r"AWS::S3::Bucket|new s3\.Bucket|S3\.Bucket"),
    "Lambda Functions": re.compile(r"AWS::Lambda::Function|new lambda\.Function|Lambda\.Function"),
    LOAD_BALANCERS: re.compile(r"AWS::ElasticLoadBalancingV2|new elbv2\."),
}

# "." overlaps the others, so files under them are reported twice
SCAN_DIRS: Tuple[str, ...] = ("src", "lib", "infrastructure", "stacks", ".")

SOURCE_PATTERNS: Tuple[str, ...] = ("*.ts", "*.js", "*.yaml", "*.yml", "*.json")


def match_resources(content: str, path: str) -> List[ResourceMention]:
    """Return one mention per resource category found in ``content``."""
    return [
        ResourceMention(category=category, file=path)
        for category, pattern in RESOURCE_PATTERNS.items()
        if pattern.search(content)
    ]


def scan_resource_mentions(root: str) -> List[ResourceMention]:
    """Scan the fixed directory list below ``root`` for resource declarations."""
    mentions: List[ResourceMention] = []
    for scan_dir in SCAN_DIRS:
        for path in walk_files(root, scan_dir, SOURCE_PATTERNS):
            content = read_text(os.path.join(root, path))
            if content is None:
                continue
            mentions.extend(match_resources(content, path))

    logger.info(f"Found {len(mentions)} resource mentions under {root}")
    return mentions
