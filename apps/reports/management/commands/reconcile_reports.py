"""
Repair departmental reports whose two representations drifted apart.

Usage:
    python manage.py reconcile_reports
"""

from django.core.management.base import BaseCommand

from apps.reports.services.report_sync import ReportSynchronizer


class Command(BaseCommand):
    help = 'Backfill typed report columns from report_data and restore missing report_data rows'

    def handle(self, *args, **options):
        self.stdout.write(self.style.MIGRATE_HEADING('Reconciling departmental reports...'))
        counts = ReportSynchronizer().reconcile()
        self.stdout.write(f"  Typed columns backfilled: {counts['columns_backfilled']}")
        self.stdout.write(f"  report_data rows restored: {counts['blobs_restored']}")
        self.stdout.write(self.style.SUCCESS('✓ Reconciliation complete'))
