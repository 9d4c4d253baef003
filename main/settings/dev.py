"""
Development settings for the tailorbook API.
"""

from .base import *

# Development-specific settings
DEBUG = True
CELERY_TASK_ALWAYS_EAGER = True

# Any local frontend may call the API during development
CORS_ALLOW_ALL_ORIGINS = True

# Configure logging for development
LOGGING["handlers"]["console"]["level"] = "INFO"
LOGGING["loggers"]["django"]["level"] = "INFO"
LOGGING["loggers"]["apps"]["level"] = "DEBUG"

