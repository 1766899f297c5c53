"""
===============================================================================
CRC CARD — domain/hierarchy.py
===============================================================================

Module:
    Reporting hierarchy (derived index + pure mutations)

Responsibilities:
    - ReportingIndex: manager -> reports index derived from managerId only,
      with cycle-safe traversals (descendants, chain of command, roots).
    - set_manager: move a user under a new manager (or make it a root),
      keeping both directReports sets in step.
    - remove_user: offboard a user, reassigning or clearing its dependents and
      purging its id from every directReports.
    - HierarchyChange: outcome of a mutation (new population or the original
      one untouched, plus the violations that caused a rejection).

Collaborators:
    - domain.entities.User
    - domain.directory_rules: validate_hierarchy re-run on the affected subtree
    - domain.value_objects: Violation, ViolationKind, ValidationResult
    - application.usecases.directory: apply the changes inside a unit of work

Rules (intent):
    - All-or-nothing: a rejected change returns the original population.
    - Inputs are never mutated; changed records are new instances.
    - Role never constrains the shape of the tree.
===============================================================================
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from .directory_rules import index_by_id, validate_hierarchy
from .entities import User
from .value_objects import ValidationResult, Violation, ViolationKind


class ReportingIndex:
    """
    Direct reports derived from managerId edges.

    This is the single-source-of-truth view of the tree: the stored
    directReports field is only compared against it, never read by it.
    """

    def __init__(self, population: Iterable[User]) -> None:
        self._managers: Dict[str, Optional[str]] = {}
        self._reports: Dict[str, Set[str]] = {}

        for user_id, user in index_by_id(population).items():
            manager_id = user.manager_id if isinstance(user.manager_id, str) else None
            self._managers[user_id] = manager_id

        for user_id, manager_id in self._managers.items():
            if manager_id is not None and manager_id != user_id:
                self._reports.setdefault(manager_id, set()).add(user_id)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._managers

    def __len__(self) -> int:
        return len(self._managers)

    def manager_of(self, user_id: str) -> Optional[str]:
        return self._managers.get(user_id)

    def direct_reports(self, manager_id: str) -> FrozenSet[str]:
        return frozenset(self._reports.get(manager_id, ()))

    def descendants(self, user_id: str) -> Set[str]:
        """Everyone below user_id, at any depth (user_id itself excluded)."""
        found: Set[str] = set()
        queue = deque(self._reports.get(user_id, ()))
        while queue:
            current = queue.popleft()
            if current in found or current == user_id:
                continue
            found.add(current)
            queue.extend(self._reports.get(current, ()))
        return found

    def chain_of_command(self, user_id: str) -> List[str]:
        """Managers above user_id, nearest first. Stops on unknown ids and cycles."""
        chain: List[str] = []
        seen = {user_id}
        current = self._managers.get(user_id)
        while current is not None and current in self._managers and current not in seen:
            chain.append(current)
            seen.add(current)
            current = self._managers.get(current)
        return chain

    def depth(self, user_id: str) -> int:
        return len(self.chain_of_command(user_id))

    def roots(self) -> List[str]:
        """Users without a manager, in population order."""
        return [uid for uid, manager_id in self._managers.items() if manager_id is None]


@dataclass(frozen=True)
class HierarchyChange:
    """
    Outcome of set_manager / remove_user.

    Contract:
      - ok => population is the new state, user is the changed (or removed) record
      - not ok => population is the original state, result holds the violations
    """

    population: Tuple[User, ...]
    user: Optional[User]
    result: ValidationResult = field(default_factory=ValidationResult)
    reassigned_ids: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.result.ok


def _reject(
    population: Tuple[User, ...],
    user: Optional[User],
    *violations: Violation,
) -> HierarchyChange:
    return HierarchyChange(
        population=population,
        user=user,
        result=ValidationResult.of(violations),
    )


def _rebuild(
    population: Tuple[User, ...],
    stored: Dict[str, User],
    replacements: Dict[str, User],
    *,
    drop: Optional[User] = None,
) -> Tuple[User, ...]:
    # Only the indexed (first) record of an id is replaced; duplicates stay as-is.
    rebuilt: List[User] = []
    for user in population:
        if drop is not None and user is drop:
            continue
        if stored.get(user.id) is user and user.id in replacements:
            rebuilt.append(replacements[user.id])
        else:
            rebuilt.append(user)
    return tuple(rebuilt)


# =============================================================================
# set_manager
# =============================================================================


def set_manager(
    user: User,
    new_manager_id: Optional[str],
    population: Iterable[User],
) -> HierarchyChange:
    """
    Reassign the manager of user.

    Rejected (nothing committed) when:
      - user is not in the population           -> ReferentialIntegrityViolation
      - new_manager_id == user.id                -> SelfReferenceViolation
      - new_manager_id is not an existing user   -> ReferentialIntegrityViolation
      - new_manager_id is a descendant of user   -> HierarchyCycleViolation
      - the affected subtree fails validate_hierarchy afterwards

    new_manager_id=None makes the user a hierarchy root.
    """
    original = tuple(population)
    stored = index_by_id(original)

    current = stored.get(user.id)
    if current is None:
        return _reject(
            original,
            user,
            Violation(
                kind=ViolationKind.REFERENTIAL_INTEGRITY,
                user_id=user.id if isinstance(user.id, str) else None,
                field="id",
                message="user is not part of the directory.",
            ),
        )

    index = ReportingIndex(original)

    if new_manager_id is not None:
        if new_manager_id == current.id:
            return _reject(
                original,
                current,
                Violation(
                    kind=ViolationKind.SELF_REFERENCE,
                    user_id=current.id,
                    field="managerId",
                    message="a user cannot be their own manager.",
                ),
            )
        if new_manager_id not in stored:
            return _reject(
                original,
                current,
                Violation(
                    kind=ViolationKind.REFERENTIAL_INTEGRITY,
                    user_id=current.id,
                    field="managerId",
                    message=f"managerId {new_manager_id!r} does not reference an existing user.",
                    related_ids=(new_manager_id,),
                ),
            )
        if new_manager_id in index.descendants(current.id):
            chain = index.chain_of_command(new_manager_id)
            upward = chain[: chain.index(current.id) + 1]
            cycle = (current.id, new_manager_id, *upward)
            return _reject(
                original,
                current,
                Violation(
                    kind=ViolationKind.HIERARCHY_CYCLE,
                    user_id=current.id,
                    field="managerId",
                    message="reassignment would create a cycle: " + " -> ".join(cycle),
                    cycle=cycle,
                ),
            )

    old_manager_id = current.manager_id
    if old_manager_id == new_manager_id:
        return HierarchyChange(population=original, user=current)

    updated = current.with_manager(new_manager_id)
    replacements: Dict[str, User] = {current.id: updated}

    old_manager = stored.get(old_manager_id) if isinstance(old_manager_id, str) else None
    if old_manager is not None and current.id in old_manager.reports:
        replacements[old_manager.id] = old_manager.with_reports(
            old_manager.reports - {current.id}
        )

    if new_manager_id is not None:
        new_manager = stored[new_manager_id]
        replacements[new_manager.id] = new_manager.with_reports(
            new_manager.reports | {current.id}
        )

    changed = _rebuild(original, stored, replacements)

    affected = {current.id, *index.descendants(current.id)}
    affected.update(mid for mid in (old_manager_id, new_manager_id) if isinstance(mid, str))
    result = validate_hierarchy(changed, scope=affected)
    if not result.ok:
        return HierarchyChange(population=original, user=current, result=result)

    return HierarchyChange(population=changed, user=updated)


# =============================================================================
# remove_user
# =============================================================================


def remove_user(
    user_id: str,
    population: Iterable[User],
    reassign_to: Optional[str] = None,
) -> HierarchyChange:
    """
    Offboard user_id.

    - Users whose managerId is user_id move under reassign_to, or become roots
      when reassign_to is None.
    - When reassign_to is itself a direct report of the removed user it takes
      over the removed user's own manager (promotion into the vacated slot).
    - user_id is purged from every directReports.

    Rejected (nothing committed) when:
      - user_id is not in the population        -> ReferentialIntegrityViolation
      - reassign_to == user_id                  -> SelfReferenceViolation
      - reassign_to is not an existing user     -> ReferentialIntegrityViolation
      - reassign_to sits deeper below user_id   -> HierarchyCycleViolation
    """
    original = tuple(population)
    stored = index_by_id(original)

    target = stored.get(user_id)
    if target is None:
        return _reject(
            original,
            None,
            Violation(
                kind=ViolationKind.REFERENTIAL_INTEGRITY,
                user_id=user_id,
                field="id",
                message="user is not part of the directory.",
            ),
        )

    if reassign_to is not None:
        if reassign_to == user_id:
            return _reject(
                original,
                target,
                Violation(
                    kind=ViolationKind.SELF_REFERENCE,
                    user_id=user_id,
                    field="managerId",
                    message="dependents cannot be reassigned to the user being removed.",
                ),
            )
        if reassign_to not in stored:
            return _reject(
                original,
                target,
                Violation(
                    kind=ViolationKind.REFERENTIAL_INTEGRITY,
                    user_id=user_id,
                    field="managerId",
                    message=f"reassignment target {reassign_to!r} does not reference an existing user.",
                    related_ids=(reassign_to,),
                ),
            )

    index = ReportingIndex(original)
    dependents = index.direct_reports(user_id)

    if reassign_to is not None and reassign_to not in dependents:
        if reassign_to in index.descendants(user_id):
            chain = index.chain_of_command(reassign_to)
            upward = chain[: chain.index(user_id)]
            cycle = (reassign_to, *upward, reassign_to)
            return _reject(
                original,
                target,
                Violation(
                    kind=ViolationKind.HIERARCHY_CYCLE,
                    user_id=reassign_to,
                    field="managerId",
                    message="reassignment would create a cycle: " + " -> ".join(cycle),
                    cycle=cycle,
                ),
            )

    promoted = reassign_to if reassign_to in dependents else None
    upper_manager_id = target.manager_id if isinstance(target.manager_id, str) else None
    moved = sorted(dependents - {promoted}) if promoted else sorted(dependents)

    replacements: Dict[str, User] = {}

    def _current(uid: str) -> User:
        return replacements.get(uid, stored[uid])

    for uid, user in stored.items():
        if uid == user_id:
            continue
        if user_id in user.reports:
            replacements[uid] = user.with_reports(user.reports - {user_id})

    for uid in moved:
        replacements[uid] = _current(uid).with_manager(reassign_to)

    if promoted is not None:
        replacements[promoted] = _current(promoted).with_manager(upper_manager_id)
        if upper_manager_id is not None and upper_manager_id in stored:
            upper = _current(upper_manager_id)
            replacements[upper_manager_id] = upper.with_reports(
                upper.reports | {promoted}
            )

    if reassign_to is not None and moved:
        heir = _current(reassign_to)
        replacements[reassign_to] = heir.with_reports(heir.reports | set(moved))

    changed = _rebuild(original, stored, replacements, drop=target)

    affected = set(dependents)
    affected.update(
        uid for uid in (reassign_to, upper_manager_id) if uid is not None
    )
    result = validate_hierarchy(changed, scope=affected)
    if not result.ok:
        return HierarchyChange(population=original, user=target, result=result)

    return HierarchyChange(
        population=changed,
        user=target,
        reassigned_ids=tuple(sorted(dependents)),
    )


def with_derived_reports(population: Iterable[User]) -> Tuple[User, ...]:
    """
    Population whose absent directReports are filled from managerId links.

    Only users with direct_reports None are touched. A stored set, even an
    empty or wrong one, is kept so validation still reports the asymmetry.
    """
    users = tuple(population)
    index = ReportingIndex(users)
    stored = index_by_id(users)
    replacements = {
        uid: replace(user, direct_reports=index.direct_reports(uid))
        for uid, user in stored.items()
        if user.direct_reports is None and index.direct_reports(uid)
    }
    return _rebuild(users, stored, replacements)
