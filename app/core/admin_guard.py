"""
Admin gate: checking -> authorized | denied.

A check resolves the session's identity and asks the role-resolution function
whether it holds the admin role. Every check takes a new generation; a result
from a check that has since been superseded is dropped, so the latest auth
state always wins. Any error from the role check denies access.

The API holds no long-lived session: require_admin runs a fresh check on
every request with that request's bearer token, so a sign-out, token expiry
or revoked grant re-gates the caller on their next request.
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class GuardState(str, Enum):
    CHECKING = "checking"
    AUTHORIZED = "authorized"
    DENIED = "denied"


def session_user_id(session: Any) -> Optional[str]:
    """Identity id from a Supabase Session, a user dict, or None."""
    if session is None:
        return None
    if isinstance(session, dict):
        user = session.get("user", session)
        user_id = user.get("id") if isinstance(user, dict) else getattr(user, "id", None)
    else:
        user = getattr(session, "user", None)
        user_id = getattr(user, "id", None) if user is not None else None
    return str(user_id) if user_id else None


class AdminGuard:
    def __init__(self, resolve_role: Callable[[str], bool]):
        self._resolve_role = resolve_role
        self._lock = threading.Lock()
        self._generation = 0
        self.state = GuardState.CHECKING
        self.user_id: Optional[str] = None

    def _evaluate(self, user_id: Optional[str]) -> GuardState:
        if user_id is None:
            return GuardState.DENIED
        try:
            is_admin = self._resolve_role(user_id)
        except Exception as e:
            logger.error(f"Error checking admin status for {user_id}: {e}")
            return GuardState.DENIED
        return GuardState.AUTHORIZED if is_admin is True else GuardState.DENIED

    def check(self, session: Any) -> GuardState:
        """Re-run the gate for this session. Returns the state this check settled on."""
        user_id = session_user_id(session)
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.state = GuardState.CHECKING
            self.user_id = user_id

        result = self._evaluate(user_id)

        with self._lock:
            if generation == self._generation:
                self.state = result
            else:
                logger.debug(f"Discarding superseded admin check for {user_id}")
        return result
