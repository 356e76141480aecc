"""In-memory summary of one handled exception."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from faultlog.timestamps import parse_timestamp

if TYPE_CHECKING:
    from faultlog.store import ErrorLogStore


@dataclass
class ErrorSummary:
    """A user-facing message plus the exception behind it.

    ``record_id`` stays ``None`` until the summary is persisted; after that it
    doubles as the correlation code shown to end users.
    """

    message: str
    cause: BaseException | None = field(default=None, repr=False, compare=False)
    record_id: int | None = None
    abstract_info: str | None = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "message" and "message" in self.__dict__:
            raise AttributeError("ErrorSummary.message is immutable")
        super().__setattr__(name, value)

    @property
    def persisted(self) -> bool:
        return self.record_id is not None

    @property
    def create_time(self) -> datetime | None:
        """When the backing record was written, or None if not persisted."""
        if self.record_id is None:
            return None
        return parse_timestamp(self.record_id)

    def write_log(self, store: ErrorLogStore) -> ErrorSummary:
        """Persist this summary to *store* and return it with ``record_id`` set."""
        return store.persist(self)

    def to_payload(self) -> dict[str, Any]:
        """Presentation view; the underlying exception is never included."""
        created = self.create_time
        return {
            "message": self.message,
            "record_id": str(self.record_id) if self.record_id is not None else None,
            "abstract_info": self.abstract_info,
            "create_time": created.isoformat(timespec="milliseconds") if created else None,
        }
