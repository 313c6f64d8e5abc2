from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ..models.entities import Group, Subject, User, UserRole

"""Entity resolution caches for one import run.

Each cache maps a business key (lower-cased subject/group name, username) to
the persistent entity, scoped to one center and one import call. Bulk
preloads keep database round-trips proportional to the number of distinct
keys rather than the number of rows. Every create or update goes through
put(), so a cache never hands back a stale entity.
"""

logger = logging.getLogger(__name__)


class SubjectCache:
    """Get-or-create cache for subjects, keyed by lower-cased name."""

    def __init__(self, repository: Any, center_id: int) -> None:
        self.repository = repository
        self.center_id = center_id
        self._by_name: dict[str, Subject] = {}

    def preload(self) -> None:
        for subject in self.repository.list_subjects(self.center_id):
            self._by_name.setdefault(subject.name.lower(), subject)
        logger.debug("subject cache preloaded: %d subjects", len(self._by_name))

    def get_or_create(self, name: str) -> tuple[Subject, bool]:
        """Return (subject, created). Creation registers the subject before returning."""
        key = name.lower()
        cached = self._by_name.get(key)
        if cached is not None:
            return cached, False
        subject = self.repository.create_subject(self.center_id, name)
        self._by_name[key] = subject
        return subject, True


class TeacherCache:
    """Teachers referenced by the Groups sheet, loaded in one batched query."""

    def __init__(self, repository: Any) -> None:
        self.repository = repository
        self._by_username: dict[str, User] = {}

    def preload(self, usernames: Iterable[str]) -> None:
        wanted = set(usernames)
        if not wanted:
            return
        for teacher in self.repository.find_users(wanted, role=UserRole.TEACHER):
            self._by_username[teacher.username] = teacher
        logger.debug("teacher cache preloaded: %d/%d found", len(self._by_username), len(wanted))

    def get(self, username: str) -> User | None:
        return self._by_username.get(username)


class GroupCache:
    """Groups of the center keyed by lower-cased name."""

    def __init__(self, repository: Any, center_id: int) -> None:
        self.repository = repository
        self.center_id = center_id
        self._by_name: dict[str, Group] = {}

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._by_name

    def put(self, group: Group) -> None:
        self._by_name[group.name.lower()] = group

    def preload(self, names: Iterable[str]) -> None:
        """Bulk load the groups among ``names`` that are not cached yet."""
        missing = {n for n in names if n.lower() not in self._by_name}
        if not missing:
            return
        for group in self.repository.find_groups(self.center_id, missing):
            self._by_name.setdefault(group.name.lower(), group)

    def resolve(self, name: str) -> Group | None:
        """Cached group, else a point lookup by (name, center)."""
        cached = self._by_name.get(name.lower())
        if cached is not None:
            return cached
        group = self.repository.find_group(self.center_id, name)
        if group is not None:
            self.put(group)
        return group


class StudentCache:
    """Users keyed by username.

    The Students sheet preload is role-agnostic so that a row naming an
    existing teacher or admin account can be reported instead of silently
    creating a duplicate username.
    """

    def __init__(self, repository: Any) -> None:
        self.repository = repository
        self._by_username: dict[str, User] = {}
        self._missing: set[str] = set()

    def put(self, user: User) -> None:
        self._by_username[user.username] = user
        self._missing.discard(user.username)

    def preload(self, usernames: Iterable[str]) -> None:
        wanted = set(usernames)
        if not wanted:
            return
        for user in self.repository.find_users(wanted):
            self.put(user)
        self._missing.update(wanted - self._by_username.keys())

    def get(self, username: str) -> User | None:
        return self._by_username.get(username)

    def resolve_student(self, username: str) -> User | None:
        """Student account for ``username``: cache first, then a point lookup."""
        cached = self._by_username.get(username)
        if cached is not None:
            return cached if cached.role is UserRole.STUDENT else None
        if username in self._missing:
            return None
        student = self.repository.find_user(username, role=UserRole.STUDENT)
        if student is None:
            self._missing.add(username)
            return None
        self.put(student)
        return student
