"""
Management command to set up the Celery Beat task that reconciles
departmental reports.

Usage:
    python manage.py setup_report_tasks [--hours N]

This command is idempotent and can be run multiple times safely.
"""

from django.core.management.base import BaseCommand
from django_celery_beat.models import PeriodicTask, IntervalSchedule

TASK_NAME = 'Reconcile Departmental Reports'
TASK_PATH = 'reports.reconcile_report_data'
TASK_DESCRIPTION = (
    'Backfills typed other_reports columns from report_data and restores '
    'report_data rows missing after an interrupted save.'
)


class Command(BaseCommand):
    help = 'Set up Celery Beat periodic task for departmental report reconciliation'

    def add_arguments(self, parser):
        parser.add_argument('--hours', type=int, default=6, help='Interval between runs in hours')

    def handle(self, *args, **options):
        hours = options['hours']
        self.stdout.write(self.style.MIGRATE_HEADING('Setting up report reconciliation task...'))

        schedule, created = IntervalSchedule.objects.get_or_create(
            every=hours,
            period=IntervalSchedule.HOURS,
        )
        if created:
            self.stdout.write(self.style.SUCCESS(f'✓ Created interval schedule: Every {hours} hours'))
        else:
            self.stdout.write(self.style.WARNING(f'• Interval schedule already exists: Every {hours} hours'))

        task, created = PeriodicTask.objects.update_or_create(
            name=TASK_NAME,
            defaults={
                'task': TASK_PATH,
                'interval': schedule,
                'enabled': True,
                'description': TASK_DESCRIPTION,
            },
        )
        if created:
            self.stdout.write(self.style.SUCCESS(f'✓ Created periodic task: {TASK_NAME}'))
        else:
            self.stdout.write(self.style.WARNING(f'• Updated existing periodic task: {TASK_NAME}'))

        self.stdout.write(self.style.MIGRATE_LABEL('\nTask Configuration:'))
        self.stdout.write(f'  Task Name: {task.name}')
        self.stdout.write(f'  Task Function: {task.task}')
        self.stdout.write(f'  Schedule: Every {schedule.every} {schedule.period}')
        self.stdout.write(f'  Enabled: {task.enabled}')

        self.stdout.write(
            '\nMake sure Celery worker and beat scheduler are running:\n'
            '  1. Start worker: celery -A core worker -l info\n'
            '  2. Start beat: celery -A core beat -l info --scheduler django_celery_beat.schedulers:DatabaseScheduler\n'
        )
