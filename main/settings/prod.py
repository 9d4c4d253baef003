"""
Production settings for the tailorbook API.
"""

import os
from .base import *

# Production specific settings
DEBUG = False

# Security settings
SECURE_SSL_REDIRECT = True
SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_BROWSER_XSS_FILTER = True
SECURE_REFERRER_POLICY = "strict-origin-when-cross-origin"
X_FRAME_OPTIONS = "DENY"

# Session security
SESSION_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_AGE = 3600  # 1 hour

# CSRF security
CSRF_COOKIE_SECURE = True
CSRF_COOKIE_HTTPONLY = True

# Database connection pooling
DATABASES["default"]["CONN_MAX_AGE"] = 60

# Static files - Use WhiteNoise for serving static files
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STATICFILES_STORAGE = "whitenoise.storage.CompressedManifestStaticFilesStorage"

# CORS - Restrict origins in production
CORS_ALLOW_ALL_ORIGINS = False
cors_origins = os.environ.get("CORS_ALLOWED_ORIGINS", "")
CORS_ALLOWED_ORIGINS = [
    origin.strip() for origin in cors_origins.split(",") if origin.strip()
]

# Email settings for production
EMAIL_BACKEND = "django.core.mail.backends.smtp.EmailBackend"

# Logging - Log to files in production
LOGGING["handlers"]["error_file"] = {
    "level": "ERROR",
    "class": "logging.FileHandler",
    "filename": LOG_DIR / "django_error.log",
    "formatter": "verbose",
}
LOGGING["loggers"]["django"]["handlers"] = ["file", "error_file"]
LOGGING["loggers"]["apps"]["handlers"] = ["file", "error_file"]

# Cache
CACHES["default"]["KEY_PREFIX"] = "tailorbook_prod"

