"""
ASGI config for the tailorbook API.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "main.settings.dev")

application = get_asgi_application()
