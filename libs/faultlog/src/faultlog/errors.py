"""Error types for the fault log.

``UserFacingError`` is the one exception kind application code raises on
purpose: its message is safe to show to end users as-is, so the resolver
looks for it anywhere in a cause chain. Everything else here is raised by
the log store itself.
"""

from __future__ import annotations


class UserFacingError(Exception):
    """An error whose message can be surfaced to end users verbatim."""


class FaultLogError(Exception):
    """Base exception for all fault-log store errors."""


class InvariantViolation(FaultLogError):
    """Raised when a summary without an underlying exception is persisted."""


class PersistenceError(FaultLogError):
    """Raised when a record cannot be written to the log directory.

    Attributes:
        record_id: The id of the record being written, if one was assigned.
        operation: The step that failed (e.g. ``"mkdir"``, ``"write"``).
        detail: A short description of what went wrong.
    """

    def __init__(
        self,
        *,
        operation: str,
        detail: str,
        record_id: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.record_id = record_id
        self.operation = operation
        self.detail = detail
        target = f"record {record_id}" if record_id is not None else "log directory"
        super().__init__(f"[{target}] {operation} failed: {detail}")
        if cause is not None:
            self.__cause__ = cause


class InvalidArgumentError(FaultLogError, ValueError):
    """Raised when a record id is empty or not a decimal number."""


class NotFoundError(FaultLogError, LookupError):
    """Raised when no record file exists for a record id."""

    def __init__(self, record_id: int, path: str) -> None:
        self.record_id = record_id
        self.path = path
        super().__init__(f"No error record {record_id} at {path}")


class CorruptRecordError(FaultLogError):
    """Raised when a record file exists but cannot be decoded."""


class MalformedIdError(FaultLogError, ValueError):
    """Raised when a record id does not parse back into a timestamp."""


class RecordIOError(FaultLogError):
    """Raised for OS-level read failures other than a missing file."""
