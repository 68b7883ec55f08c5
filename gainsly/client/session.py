"""
Gainsly Client - Auth State.

Holds who is signed in and the current token pair. When a storage path is
given, the tokens and user id are mirrored to a small JSON file so a later
run can restore the session.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, PrivateAttr

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
REFRESH_TOKEN_KEY = "refresh_token"
USER_ID_KEY = "current_user_id"


class AuthState(BaseModel):
    """Auth slice: session data plus the transitions that change it."""

    is_authenticated: bool = False
    user: Optional[Dict[str, Any]] = None
    token: Optional[str] = None
    refresh_token: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None

    _storage_path: Optional[Path] = PrivateAttr(default=None)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "AuthState":
        """
        Build a state bound to ``path``, picking up stored tokens if present.

        Restored tokens are not trusted yet: ``is_authenticated`` stays False
        until the session is confirmed against the API.
        """
        state = cls()
        if not path:
            return state

        state._storage_path = Path(path)
        if state._storage_path.exists():
            try:
                stored = json.loads(state._storage_path.read_text())
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Ignoring unreadable session file {path}: {e}")
                return state
            state.token = stored.get(TOKEN_KEY)
            state.refresh_token = stored.get(REFRESH_TOKEN_KEY)
            if stored.get(USER_ID_KEY):
                state.user = {"id": stored[USER_ID_KEY]}
        return state

    # Login

    def login_start(self) -> None:
        self.loading = True
        self.error = None

    def login_success(self, user: Dict[str, Any], token: str, refresh_token: str) -> None:
        self.is_authenticated = True
        self.user = dict(user)
        self.token = token
        self.refresh_token = refresh_token
        self.loading = False
        self.error = None
        self._persist()

    def login_failure(self, message: str) -> None:
        self.loading = False
        self.error = message

    # Register

    def register_start(self) -> None:
        self.login_start()

    def register_success(self, user: Dict[str, Any], token: str, refresh_token: str) -> None:
        self.login_success(user, token, refresh_token)

    def register_failure(self, message: str) -> None:
        self.login_failure(message)

    # Session

    def logout(self) -> None:
        self.is_authenticated = False
        self.user = None
        self.token = None
        self.refresh_token = None
        self._persist()

    def update_user(self, changes: Dict[str, Any]) -> None:
        """Merge ``changes`` into the user. No-op when nobody is signed in."""
        if self.user is not None:
            self.user = {**self.user, **changes}
            self._persist()

    def update_token(self, token: str, refresh_token: str) -> None:
        self.token = token
        self.refresh_token = refresh_token
        self._persist()

    def _persist(self) -> None:
        if self._storage_path is None:
            return
        if not self.token and not self.refresh_token:
            self._storage_path.unlink(missing_ok=True)
            return
        payload = {
            TOKEN_KEY: self.token,
            REFRESH_TOKEN_KEY: self.refresh_token,
            USER_ID_KEY: (self.user or {}).get("id"),
        }
        self._storage_path.parent.mkdir(parents=True, exist_ok=True)
        self._storage_path.write_text(json.dumps(payload))
