from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Person:
    """Someone known to the roster (student, faculty or admin)."""

    person_id: int
    full_name: str
    role: Role
    external_ref: Optional[str] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class Group:
    """A class/group with one owning issuer and a set of enrolled members."""

    group_id: int
    name: str
    code: str
    owner_id: int
    department: Optional[str] = None
    member_ids: FrozenSet[int] = field(default_factory=frozenset)

    def is_owned_by(self, person_id: int) -> bool:
        return self.owner_id == int(person_id)

    def has_member(self, person_id: int) -> bool:
        return int(person_id) in self.member_ids
