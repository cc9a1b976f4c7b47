"""
Admin session check.

The back office sends a shared admin token in the X-Admin-Token header.
Every mutating import action asks ``session.is_admin()`` first.
"""

import hmac
from typing import Optional
import structlog

from config import settings

logger = structlog.get_logger(__name__)


class AdminSession:
    """Per-request view of the caller's admin status."""

    def __init__(self, token: Optional[str], expected_token: Optional[str] = None):
        self.token = token
        self.expected_token = expected_token if expected_token is not None else settings.admin_token

    def is_admin(self) -> bool:
        """True only when an admin token is configured and the caller sent it."""
        if not self.expected_token:
            logger.warning("admin_token_not_configured")
            return False
        if not self.token:
            return False
        return hmac.compare_digest(self.token.encode(), self.expected_token.encode())


class StaticSession:
    """Session with a fixed answer, for scripts and tests."""

    def __init__(self, is_admin: bool):
        self._is_admin = is_admin

    def is_admin(self) -> bool:
        return self._is_admin
