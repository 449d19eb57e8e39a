"""
Error taxonomy for the data-access layer.

Absence is not an error here: repositories return None (or False from delete).
Everything below is a real failure surfaced to the caller.
"""
from typing import Optional


class DataAccessError(Exception):
    """Base class for every failure raised by repositories and batch services."""


class ShapeError(DataAccessError):
    """A legacy row is missing a field the canonical contract requires."""

    def __init__(self, family: str, entity_id: Optional[str], field: str, reason: str = "missing"):
        self.family = family
        self.entity_id = entity_id
        self.field = field
        self.reason = reason
        super().__init__(f"{family} row {entity_id or '<unknown>'}: field '{field}' {reason}")


class DuplicateApplication(DataAccessError):
    def __init__(self, candidate_id: str, job_id: str):
        self.candidate_id = candidate_id
        self.job_id = job_id
        super().__init__(f"Candidate {candidate_id} already applied to job {job_id}")


class InvalidTransition(DataAccessError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move application from '{current}' to '{requested}'")


class OwnershipViolation(DataAccessError):
    def __init__(self, acting_id: Optional[str], entity_id: str):
        self.acting_id = acting_id
        self.entity_id = entity_id
        super().__init__(f"Identity {acting_id} does not own {entity_id}")


class BackendUnavailable(DataAccessError):
    """Transient network or driver failure. Callers may retry with backoff."""

    def __init__(self, backend: str, message: str):
        self.backend = backend
        super().__init__(f"{backend} backend unavailable: {message}")


class IntegrityViolation(DataAccessError):
    """The backend rejected a write on a constraint (unique, foreign key, ...)."""

    def __init__(self, backend: str, message: str, code: Optional[str] = None):
        self.backend = backend
        self.code = code
        super().__init__(f"{backend} rejected write ({code or 'integrity'}): {message}")


class ImmutableRecord(DataAccessError):
    """Write aimed at an append-only row or an immutable field."""


class BackupNotFound(DataAccessError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Backup file not found: {path}")
