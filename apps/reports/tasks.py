"""
Celery tasks for departmental reports.

Tasks:
- reconcile_report_data: repairs reports whose ``other_reports`` row and
  ``report_data`` blob drifted apart because a save was interrupted between
  the two writes
"""

from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    name='reports.reconcile_report_data',
    max_retries=3,
    default_retry_delay=60,
)
def reconcile_report_data(self):
    """
    Backfill empty typed columns from ``report_data`` and restore missing blobs.

    Idempotent; a fully consistent database is left untouched.

    Returns:
        dict: counts of backfilled rows and restored blobs
    """
    try:
        from apps.reports.services.report_sync import ReportSynchronizer

        logger.info("[Report Sync] Starting reconciliation")
        counts = ReportSynchronizer().reconcile()
        logger.info(f"[Report Sync] Finished: {counts}")
        return counts

    except Exception as exc:
        logger.error(f"[Report Sync] Reconciliation failed: {exc}", exc_info=True)
        raise self.retry(exc=exc)
