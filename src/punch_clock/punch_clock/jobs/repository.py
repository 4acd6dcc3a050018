from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import JobShiftConfig


class JobRepository(Protocol):
    def get_by_id(self, job_id: str) -> Optional[JobShiftConfig]:
        raise NotImplementedError

    def get_shift_configs(self, job_ids: Sequence[str]) -> Mapping[str, JobShiftConfig]:
        """Shift configs keyed by job id; jobs without a row are absent."""

        raise NotImplementedError
