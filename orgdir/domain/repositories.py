"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define the persistence contract of the user directory (port).
- Define the unit of work that gives every hierarchy mutation an atomic,
  serializable transaction boundary.
- Define the read-only catalog of external Departments and Teams.

Collaborators
- domain.entities: User
- application.usecases.directory: depends only on these ports
- infrastructure.repositories.in_memory: reference implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports.
- Implementations MUST match method signatures exactly.

Notes
- typing.Protocol for structural subtyping.
- Outputs are concrete lists for predictable iteration.
- The storage layer is also expected to enforce id/email uniqueness on its own.
"""

from typing import ContextManager, List, Optional, Protocol, Sequence

from .entities import User


class DirectoryUnitOfWork(Protocol):
    """
    R: One transaction against the directory.

    snapshot() returns the population as seen at the start of the transaction.
    commit() replaces the whole population atomically. Leaving the block
    without commit() discards the work.
    """

    def snapshot(self) -> List[User]:
        """R: Consistent copy of every stored user."""
        ...

    def commit(self, users: Sequence[User]) -> None:
        """R: Replace the stored population with users."""
        ...


class UserDirectoryRepository(Protocol):
    """
    R: Interface for user directory persistence.

    Implementations must provide:
      - Point reads by id and by email (case-insensitive)
      - Listings by placement
      - A unit of work serializing concurrent mutations
    """

    def list_users(self) -> List[User]:
        """R: Every user, deterministic order."""
        ...

    def get_user(self, user_id: str) -> Optional[User]:
        """R: Fetch a user by id."""
        ...

    def get_user_by_email(self, email: str) -> Optional[User]:
        """R: Fetch a user by email (trimmed, case-insensitive)."""
        ...

    def list_users_by_department(self, department_id: str) -> List[User]:
        """R: Users placed in a department."""
        ...

    def list_users_by_team(self, team_id: str) -> List[User]:
        """R: Users placed in a team."""
        ...

    def unit_of_work(self) -> ContextManager[DirectoryUnitOfWork]:
        """R: Open a serializable transaction."""
        ...


class PlacementCatalog(Protocol):
    """
    R: Read-only view of external Departments and Teams.

    Used to check referential validity of departmentId / teamId.
    """

    def department_exists(self, department_id: str) -> bool:
        ...

    def team_exists(self, team_id: str) -> bool:
        ...
