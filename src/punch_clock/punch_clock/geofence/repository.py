from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import GeofenceSettings


class GeofenceRepository(Protocol):
    def list_for_user(self, *, user_id: str, company_id: Optional[str]) -> Sequence[GeofenceSettings]:
        """Latest employee settings rows first (at most a handful)."""

        raise NotImplementedError
