"""Authenticated session signal consumed by the persistence layer.

The sign-in flow itself lives elsewhere; this object only answers "is a
session active" and carries the identity used to scope remote rows.
"""
from threading import Lock
from typing import Optional


class SessionState:
    def __init__(self, user_id: Optional[str] = None, access_token: Optional[str] = None):
        self._lock = Lock()
        self.user_id = user_id
        self.access_token = access_token

    def is_active(self) -> bool:
        with self._lock:
            return bool(self.user_id and self.access_token)

    def sign_in(self, user_id: str, access_token: str):
        with self._lock:
            self.user_id = user_id
            self.access_token = access_token

    def sign_out(self):
        with self._lock:
            self.user_id = None
            self.access_token = None

    def __repr__(self) -> str:
        return f"SessionState(user_id={self.user_id!r}, active={self.is_active()})"
