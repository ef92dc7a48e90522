"""
Fleet Discovery
===============
Liệt kê các Auto Scaling Groups và suy ra tên các resources liên quan.

Naming convention:
    'sssites-ssorg-prod-WebServerGroup-M4B333CXXJQU'
        → stack:    'sssites.ssorg.prod.web'
        → database: 'sssites-ssorg-prod'
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

import boto3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceTarget:
    """
    Một server group cần phân tích.

    Attributes:
        name: Tên stack (dimension 'Stack' của custom metrics)
        group_name: Tên Auto Scaling Group
        database_name: DB instance identifier
    """
    name: str
    group_name: str
    database_name: str


def target_from_group_name(
    group_name: str,
    group_filter: str = "WebServerGroup"
) -> Optional[ResourceTarget]:
    """
    Suy ra ResourceTarget từ tên ASG.

    Returns:
        ResourceTarget, hoặc None nếu tên không khớp convention
    """
    if group_filter not in group_name:
        return None

    parts = group_name.split('-')
    if len(parts) <= 3:
        return None

    prefix = parts[:3]
    return ResourceTarget(
        name='.'.join(prefix) + '.web',
        group_name=group_name,
        database_name='-'.join(prefix)
    )


def targets_from_group_names(
    group_names: Iterable[str],
    group_filter: str = "WebServerGroup"
) -> List[ResourceTarget]:
    """Lọc và chuyển danh sách tên ASG thành targets."""
    targets = []
    for group_name in group_names:
        target = target_from_group_name(group_name, group_filter)
        if target is None:
            logger.debug("Ignoring auto scaling group %s", group_name)
            continue
        targets.append(target)
    return targets


class AutoScalingGroupDiscovery:
    """Liệt kê ASGs của một region qua boto3."""

    def __init__(self, region: str, client=None):
        self.region = region
        self.client = client or boto3.client('autoscaling', region_name=region)

    def group_names(self) -> List[str]:
        paginator = self.client.get_paginator('describe_auto_scaling_groups')
        names = []
        for page in paginator.paginate():
            names.extend(g['AutoScalingGroupName'] for g in page['AutoScalingGroups'])
        return names

    def discover(self, group_filter: str = "WebServerGroup") -> List[ResourceTarget]:
        names = self.group_names()
        targets = targets_from_group_names(names, group_filter)
        logger.info("Discovered %d of %d auto scaling groups in %s", len(targets), len(names), self.region)
        return targets
