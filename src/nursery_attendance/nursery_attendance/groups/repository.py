from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Group


class GroupRepository(Protocol):
    def get_by_id(self, group_id: int) -> Optional[Group]:
        raise NotImplementedError

    def list_all(self, *, section: Optional[str] = None) -> Sequence[Group]:
        """Groups ordered by name, optionally restricted to one section."""

        raise NotImplementedError
