# =============================================================================
# Sentry Error Tracking Integration
# =============================================================================
#
# Setup:
#   1. Create a Python project at sentry.io
#   2. Copy DSN to .env: LINGUACACHE_SENTRY_DSN=https://...@sentry.io/...
#
# Usage:
#   Call init_sentry() once at startup (the linguacache-warmup CLI does).
#   The Localizer reports translations that fell back to the original
#   text through capture_exception().
#
# =============================================================================

import logging
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from linguacache.config import get_settings

logger = logging.getLogger(__name__)

# Extras that may carry user text
FILTERED_EXTRAS = ("text", "translation")


def init_sentry(dsn: str | None = None, **options: Any) -> bool:
    """
    Initialize Sentry error tracking.

    Extra keyword arguments go straight to sentry_sdk.init (e.g. transport).

    Returns True if initialized, False if skipped.
    """
    settings = get_settings()
    dsn = dsn if dsn is not None else settings.sentry_dsn

    if not dsn:
        logger.info("Sentry DSN not set - error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=settings.environment,
        integrations=[
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR,
            ),
        ],
        # Source text may be user content, including in frame locals
        send_default_pii=False,
        include_local_variables=False,
        before_send=_filter_events,
        **options,
    )

    logger.info(f"Sentry initialized for {settings.environment}")
    return True


def _filter_events(event: dict, hint: dict) -> dict | None:
    """Strip translated text from events; it may be user content."""
    extra = event.get("extra")
    if isinstance(extra, dict):
        for key in FILTERED_EXTRAS:
            if key in extra:
                extra[key] = "[Filtered]"
    return event


def is_enabled() -> bool:
    return sentry_sdk.is_initialized()


def capture_exception(error: BaseException, **context) -> str | None:
    """
    Capture an exception to Sentry.

    Returns the event ID if captured, None otherwise.
    """
    if not is_enabled():
        logger.debug(f"Error not reported (Sentry disabled): {error!r}")
        return None

    with sentry_sdk.new_scope() as scope:
        for key, value in context.items():
            scope.set_extra(key, value)
        return sentry_sdk.capture_exception(error)
