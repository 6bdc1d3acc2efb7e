"""Capability-based authorization.

Every operation exposed over HTTP declares a :class:`Capability`; the
:class:`AuthorizationGate` is the single place that turns a principal, a
capability and the targeted group/person into allow or deny. Services below
the gate never look at role strings.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..roster.repository import RosterRepository


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as supplied by the identity provider."""

    person_id: int
    role: Role


class Capability(str, Enum):
    ISSUE_SESSION = "issue_session"
    VIEW_SESSION = "view_session"
    REDEEM = "redeem"
    VIEW_HISTORY = "view_history"
    VIEW_GROUP_RECORDS = "view_group_records"
    VIEW_GROUP_ANALYTICS = "view_group_analytics"
    VIEW_PERSON_ANALYTICS = "view_person_analytics"


@dataclass(frozen=True)
class Requirement:
    roles: FrozenSet[Role]
    # Roles that must additionally own the targeted group.
    owner_roles: FrozenSet[Role] = field(default_factory=frozenset)
    # Roles that may only target themselves.
    self_roles: FrozenSet[Role] = field(default_factory=frozenset)


ALL_ROLES = frozenset(Role)

REQUIREMENTS = {
    Capability.ISSUE_SESSION: Requirement(roles=frozenset({Role.FACULTY}), owner_roles=frozenset({Role.FACULTY})),
    Capability.VIEW_SESSION: Requirement(
        roles=frozenset({Role.FACULTY, Role.ADMIN}), owner_roles=frozenset({Role.FACULTY})
    ),
    Capability.REDEEM: Requirement(roles=frozenset({Role.STUDENT})),
    Capability.VIEW_HISTORY: Requirement(roles=ALL_ROLES),
    Capability.VIEW_GROUP_RECORDS: Requirement(
        roles=frozenset({Role.FACULTY, Role.ADMIN}), owner_roles=frozenset({Role.FACULTY})
    ),
    Capability.VIEW_GROUP_ANALYTICS: Requirement(
        roles=frozenset({Role.FACULTY, Role.ADMIN}), owner_roles=frozenset({Role.FACULTY})
    ),
    Capability.VIEW_PERSON_ANALYTICS: Requirement(roles=ALL_ROLES, self_roles=frozenset({Role.STUDENT})),
}


class AuthorizationGate:
    def __init__(self, roster: RosterRepository, requirements: Optional[dict] = None):
        self._roster = roster
        self._requirements = requirements or REQUIREMENTS

    def require(
        self,
        principal: Principal,
        capability: Capability,
        *,
        group_id: Optional[int] = None,
        person_id: Optional[int] = None,
    ) -> None:
        req = self._requirements[capability]

        if principal.role not in req.roles:
            raise AuthorizationError(f"Role '{principal.role.value}' is not allowed to {capability.value}")

        if principal.role in req.owner_roles:
            if group_id is None:
                raise ValidationError("groupId is required")
            group = self._roster.get_group(int(group_id))
            if not group:
                raise NotFoundError("Group not found")
            if not group.is_owned_by(principal.person_id):
                raise AuthorizationError("Not authorized for this group")

        if principal.role in req.self_roles and person_id is not None and int(person_id) != principal.person_id:
            raise AuthorizationError("Not authorized for this person")
