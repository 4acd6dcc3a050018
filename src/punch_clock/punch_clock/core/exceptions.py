from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record (job, cost code, time card) does not exist."""


class GeofenceError(ValidationError):
    """Raised when a punch is blocked by the employee's job-site distance rule."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        action: str,
        distance_from_job_meters: int | None = None,
        distance_limit_meters: float | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.action = action
        self.distance_from_job_meters = distance_from_job_meters
        self.distance_limit_meters = distance_limit_meters

    def to_dict(self) -> dict:
        out = {"error": str(self), "code": self.code, "action": self.action, "block_reason": self.code}
        if self.distance_from_job_meters is not None:
            out["distance_from_job_meters"] = self.distance_from_job_meters
            out["distance_limit_meters"] = self.distance_limit_meters
        return out
