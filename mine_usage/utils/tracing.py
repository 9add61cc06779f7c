"""Session IDs for telling apart log lines from separate CLI runs."""

import uuid
import logging
from contextvars import ContextVar
from typing import Optional

session_id: ContextVar[Optional[str]] = ContextVar("session_id", default=None)


class SessionIdFilter(logging.Filter):
    """Logging filter that stamps each record with the current session ID.

    Formatters can then use %(session_id)s.
    """

    def filter(self, record):
        sid = session_id.get() or "-"
        record.session_id = sid[:8]
        return True


def get_session_id() -> str:
    """Get current session ID, creating one if it doesn't exist."""
    sid = session_id.get()
    if sid is None:
        sid = str(uuid.uuid4())
        session_id.set(sid)
    return sid
