"""JSON encoding of on-disk error records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, ValidationError

from faultlog.errors import CorruptRecordError


class LogRecord(BaseModel):
    """The persisted body of one error record."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    abstract: str
    detail: str


def encode_record(abstract: str, detail: str) -> str:
    """Serialize a record to its JSON file content."""
    return LogRecord(abstract=abstract, detail=detail).model_dump_json(indent=2) + "\n"


def decode_record(text: str | bytes) -> LogRecord:
    """Parse JSON file content back into a :class:`LogRecord`.

    Raises:
        CorruptRecordError: If the content is not valid JSON or lacks the
            ``abstract``/``detail`` string fields.
    """
    try:
        return LogRecord.model_validate_json(text)
    except ValidationError as exc:
        raise CorruptRecordError(f"Undecodable error record: {exc.error_count()} validation error(s)") from exc
