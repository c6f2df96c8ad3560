"""
rbac_gate.services.user_service

Small in-memory user service used to exercise guarded invocation logging.

Responsibilities:
- Add and fetch users, and fail on demand so the after-throwing path is observable.
"""

from __future__ import annotations

import threading


class UserServiceError(RuntimeError):
    pass


class UserService:
    def __init__(self, *, default_user: str = "Atrangi") -> None:
        self._lock = threading.Lock()
        self._users: list[str] = [default_user]

    def add_user(self, name: str) -> None:
        with self._lock:
            self._users.append(name)

    def get_user(self) -> str:
        with self._lock:
            return self._users[-1]

    def list_users(self) -> list[str]:
        with self._lock:
            return list(self._users)

    def throw_error(self) -> None:
        raise UserServiceError("Something went wrong!")
