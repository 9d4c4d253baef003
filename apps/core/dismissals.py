"""
Session-scoped reminder dismissals.

A "session" is the access token the tailor is using: dismissals are keyed by
the tailor id and the token's ``jti`` and expire with the token, so they are
never persisted to the database and disappear on the next login.
"""
import logging
from typing import FrozenSet

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


def session_key(request) -> str:
    """Identify the current session from the JWT, falling back to the user alone."""
    token = getattr(request, "auth", None)
    jti = None
    if token is not None:
        try:
            jti = token.get("jti")
        except AttributeError:
            jti = None
    return f"reminder_dismissals:{request.user.pk}:{jti or 'default'}"


def _ttl() -> int:
    return int(getattr(settings, "TAILOR_REMINDER_DISMISSAL_TTL", DEFAULT_TTL_SECONDS))


def get_dismissed(request) -> FrozenSet[str]:
    return frozenset(cache.get(session_key(request), ()))


def dismiss(request, order_id: str) -> FrozenSet[str]:
    """Add an order to the session's dismissed set; repeating it is a no-op."""
    key = session_key(request)
    dismissed = set(cache.get(key, ()))
    order_id = str(order_id)
    if order_id not in dismissed:
        dismissed.add(order_id)
        cache.set(key, sorted(dismissed), _ttl())
        logger.debug(f"Dismissed reminder for order {order_id} ({key})")
    return frozenset(dismissed)
