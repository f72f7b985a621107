"""
Celery tasks for the community directory.

This module defines maintenance tasks for:
- Auditing (and optionally repairing) directory references

Related files:
    - services.py: DirectoryAuditService

Usage:
    from communities.tasks import audit_directory_integrity

    audit_directory_integrity.delay(repair=True)
"""

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def audit_directory_integrity(self, repair: bool = False) -> dict:
    """
    Audit communities, memberships, channels and meeting channels.

    Args:
        repair: Fix repairable issues (missing owner membership,
            meeting channel from another community)

    Returns:
        The audit report as a dict
    """
    from communities.services import DirectoryAuditService

    result = DirectoryAuditService.audit(repair=repair)
    report = result.data.to_dict()

    if report["issue_count"]:
        logger.warning(f"Directory audit found issues: {report}")
    else:
        logger.info("Directory audit found no issues")
    return report
