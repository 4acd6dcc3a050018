from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CostCode:
    cost_code_id: str
    job_id: str
    code: str
    description: Optional[str] = None
    is_active: bool = True
