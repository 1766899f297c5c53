"""
============================================================
CRC CARD — infrastructure/repositories/in_memory/user_directory.py
============================================================
Class: InMemoryUserDirectoryRepository

Responsibilities:
  - Store users in memory (tests / local tooling / audits of exports).
  - Point reads by id and email, listings by department and team.
  - Provide the unit of work: one serializable transaction per mutation.
  - Keep deterministic ordering: name (case-insensitive) ASC, id ASC.

Collaborators:
  - domain.entities.User
  - domain.repositories.UserDirectoryRepository / DirectoryUnitOfWork
  - crosscutting.exceptions.UnitOfWorkError

Constraints / Notes:
  - Thread-safe: an RLock guards the table; a unit of work holds it from
    entering the block until leaving it, so concurrent mutations serialize.
  - Defensive copies: stored records are never handed out by reference.
  - Pure repo: does NOT validate invariants (use cases do, before commit).
============================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from threading import RLock
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from ....crosscutting.exceptions import UnitOfWorkError
from ....domain.directory_rules import normalize_email
from ....domain.entities import User
from ....domain.repositories import UserDirectoryRepository


class _InMemoryUnitOfWork:
    """
    Transaction handle given out by unit_of_work().

    Lives only inside the with-block; commit() at most once.
    """

    def __init__(self, repository: "InMemoryUserDirectoryRepository") -> None:
        self._repository = repository
        self._open = True
        self._committed = False

    def snapshot(self) -> List[User]:
        self._ensure_open()
        return self._repository._copy_all()

    def commit(self, users: Sequence[User]) -> None:
        self._ensure_open()
        if self._committed:
            raise UnitOfWorkError("unit of work already committed")
        self._repository._replace_all(users)
        self._committed = True

    @property
    def committed(self) -> bool:
        return self._committed

    def close(self) -> None:
        self._open = False

    def _ensure_open(self) -> None:
        if not self._open:
            raise UnitOfWorkError("unit of work used outside its block")


class InMemoryUserDirectoryRepository(UserDirectoryRepository):
    """
    In-memory, thread-safe user directory.

    Mental model:
    - _users is the "table" (id -> User), insertion order kept.
    - Reads copy under the lock; writes go through unit_of_work().
    """

    def __init__(self, users: Iterable[User] | None = None) -> None:
        self._lock = RLock()
        self._users: Dict[str, User] = {}
        if users is not None:
            self._replace_all(list(users))

    # =========================================================
    # Internal helpers
    # =========================================================
    @staticmethod
    def _copy(user: User) -> User:
        return replace(user)

    @staticmethod
    def _sort_key(user: User) -> tuple[str, str]:
        name = user.name if isinstance(user.name, str) else ""
        return (name.strip().lower(), str(user.id))

    @classmethod
    def _sorted(cls, users: Iterable[User]) -> List[User]:
        return sorted(users, key=cls._sort_key)

    def _copy_all(self) -> List[User]:
        with self._lock:
            return [self._copy(u) for u in self._users.values()]

    def _replace_all(self, users: Sequence[User]) -> None:
        table: Dict[str, User] = {}
        for user in users:
            if user.id in table:
                raise UnitOfWorkError(f"duplicate id {user.id!r} in committed population")
            table[user.id] = self._copy(user)
        with self._lock:
            self._users = table

    # =========================================================
    # Reads
    # =========================================================
    def list_users(self) -> List[User]:
        return self._sorted(self._copy_all())

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return self._copy(user) if user is not None else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        key = normalize_email(email)
        with self._lock:
            for user in self._users.values():
                if isinstance(user.email, str) and normalize_email(user.email) == key:
                    return self._copy(user)
        return None

    def list_users_by_department(self, department_id: str) -> List[User]:
        return self._sorted(
            u for u in self._copy_all() if u.department_id == department_id
        )

    def list_users_by_team(self, team_id: str) -> List[User]:
        return self._sorted(u for u in self._copy_all() if u.team_id == team_id)

    # =========================================================
    # Writes
    # =========================================================
    @contextmanager
    def unit_of_work(self) -> Iterator[_InMemoryUnitOfWork]:
        """
        Serializable transaction.

        The lock is held for the whole block, so a second mutation waits until
        the first one has committed or been discarded.
        """
        with self._lock:
            uow = _InMemoryUnitOfWork(self)
            try:
                yield uow
            finally:
                uow.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
