"""
In-memory store for import wizard sessions.
Sessions expire after a period without use.
Single-server only: sessions are lost on restart.
"""
import uuid
from datetime import datetime, timedelta
from typing import Optional

from config import settings
from exceptions import WizardSessionNotFoundError
from services.import_wizard_service import ImportWizardSession

_sessions: dict[str, tuple[datetime, ImportWizardSession]] = {}


def _expiry(ttl_minutes: Optional[int]) -> datetime:
    minutes = ttl_minutes if ttl_minutes is not None else settings.wizard_session_ttl_minutes
    return datetime.now() + timedelta(minutes=minutes)


def create_session(
    wizard: Optional[ImportWizardSession] = None,
    ttl_minutes: Optional[int] = None,
) -> tuple[str, ImportWizardSession]:
    """Store a new wizard session, return (session_id, session)."""
    _cleanup_expired()
    session_id = str(uuid.uuid4())
    wizard = wizard or ImportWizardSession()
    _sessions[session_id] = (_expiry(ttl_minutes), wizard)
    return session_id, wizard


def get_session(session_id: str, ttl_minutes: Optional[int] = None) -> ImportWizardSession:
    """
    Fetch a session and extend its expiry.

    Raises:
        WizardSessionNotFoundError: Unknown or expired id
    """
    entry = _sessions.get(session_id)
    if entry is None:
        raise WizardSessionNotFoundError(session_id)
    expires_at, wizard = entry
    if datetime.now() > expires_at:
        del _sessions[session_id]
        raise WizardSessionNotFoundError(session_id)
    _sessions[session_id] = (_expiry(ttl_minutes), wizard)
    return wizard


def delete_session(session_id: str) -> None:
    """Remove session after summary or cancel."""
    _sessions.pop(session_id, None)


def clear_sessions() -> None:
    _sessions.clear()


def _cleanup_expired() -> None:
    """Remove all expired entries."""
    now = datetime.now()
    expired = [k for k, (exp, _) in _sessions.items() if now > exp]
    for k in expired:
        del _sessions[k]
