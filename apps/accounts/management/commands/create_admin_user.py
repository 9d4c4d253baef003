"""
Management command to create the platform admin account.
"""
import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = 'Create the admin account used to approve tailors (no-op if it already exists)'

    def add_arguments(self, parser):
        parser.add_argument('--email', default=os.environ.get('ADMIN_EMAIL', 'admin@tailormanagement.com'))
        parser.add_argument('--name', default='Super Admin')
        parser.add_argument('--phone', default='')
        parser.add_argument('--password', default=None,
                            help='Defaults to the ADMIN_PASSWORD environment variable')

    def handle(self, *args, **options):
        User = get_user_model()
        email = options['email']

        existing = User.objects.filter(email__iexact=email).first()
        if existing:
            self.stdout.write(f'Admin user already exists: {existing.email}')
            return

        password = options['password'] or os.environ.get('ADMIN_PASSWORD')
        if not password:
            raise CommandError('Provide --password or set ADMIN_PASSWORD')

        user = User.objects.create_superuser(
            email=email,
            password=password,
            name=options['name'],
            phone=options['phone'],
        )
        self.stdout.write(
            self.style.SUCCESS(f'Admin user created: {user.email} ({user.id})')
        )
