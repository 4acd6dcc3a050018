from __future__ import annotations

from enum import Enum


class TimeCardStatus(str, Enum):
    """Trạng thái duyệt của time card lưu trong CSDL."""

    APPROVED = "approved"
    PENDING = "pending"
    DELETED = "deleted"


class PunchType(str, Enum):
    PUNCHED_IN = "punched_in"
    PUNCHED_OUT = "punched_out"


class OutcomeStatus(str, Enum):
    """Result of processing a single card inside a batch."""

    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"
