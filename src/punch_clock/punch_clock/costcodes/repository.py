from __future__ import annotations

from typing import Optional, Protocol

from .model import CostCode


class CostCodeRepository(Protocol):
    def get_by_id(self, cost_code_id: str) -> Optional[CostCode]:
        raise NotImplementedError
