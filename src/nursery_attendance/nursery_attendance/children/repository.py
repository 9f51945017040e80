from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import Child


class ChildRepository(Protocol):
    """Repository interface for Child.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, child_id: int) -> Optional[Child]:
        raise NotImplementedError

    def get_active_by_code(self, code_qr_id: str) -> Optional[Child]:
        raise NotImplementedError

    def list_active(self, *, section: Optional[str] = None, group_id: Optional[int] = None) -> Sequence[Child]:
        raise NotImplementedError

    def count_active_by_group(self) -> Mapping[int, int]:
        """Occupant count per group id, derived by counting active children."""

        raise NotImplementedError

    def update_group(self, child_id: int, *, group_id: Optional[int], section: Optional[str]) -> bool:
        raise NotImplementedError
