"""
Management command to register the daily collection-reminder task with celery beat.
"""
from django.core.management.base import BaseCommand
from django_celery_beat.models import PeriodicTask, CrontabSchedule
import json

TASK_NAME = 'send-collection-reminders'


class Command(BaseCommand):
    help = 'Set up the daily collection reminder periodic task'

    def add_arguments(self, parser):
        parser.add_argument('--hour', default='7', help='Hour of day (UTC) to send reminders')
        parser.add_argument('--minute', default='0')

    def handle(self, *args, **options):
        schedule, created = CrontabSchedule.objects.get_or_create(
            minute=options['minute'],
            hour=options['hour'],
            day_of_week='*',
            day_of_month='*',
            month_of_year='*',
        )
        if created:
            self.stdout.write(
                self.style.SUCCESS(f"Created crontab schedule for daily at {schedule.hour}:{schedule.minute} UTC")
            )

        _, created = PeriodicTask.objects.update_or_create(
            name=TASK_NAME,
            defaults={
                'task': 'apps.core.tasks.reminders.send_collection_reminders',
                'crontab': schedule,
                'enabled': True,
                'kwargs': json.dumps({}),
            }
        )

        if created:
            self.stdout.write(self.style.SUCCESS(f'Created periodic task: {TASK_NAME}'))
        else:
            self.stdout.write(f'Updated periodic task: {TASK_NAME}')
