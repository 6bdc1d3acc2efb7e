from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Group, Person


class RosterRepository(Protocol):
    """Read-only view of group membership and ownership.

    Roster CRUD lives outside this package; services only ever read through this interface.
    """

    def get_group(self, group_id: int) -> Optional[Group]:
        raise NotImplementedError

    def get_person(self, person_id: int) -> Optional[Person]:
        raise NotImplementedError

    def is_member(self, group_id: int, person_id: int) -> bool:
        raise NotImplementedError

    def members_of(self, group_id: int) -> Sequence[Person]:
        raise NotImplementedError

    def groups_for_person(self, person_id: int) -> Sequence[Group]:
        raise NotImplementedError
