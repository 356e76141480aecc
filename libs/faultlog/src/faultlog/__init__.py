"""faultlog — resolve exceptions into user-facing summaries and keep their traces on disk."""

from faultlog.codec import LogRecord, decode_record, encode_record
from faultlog.config import FaultLogConfig
from faultlog.errors import (
    CorruptRecordError,
    FaultLogError,
    InvalidArgumentError,
    InvariantViolation,
    MalformedIdError,
    NotFoundError,
    PersistenceError,
    RecordIOError,
    UserFacingError,
)
from faultlog.handle import LogHandle
from faultlog.lazy import LazyCell
from faultlog.resolver import ErrorResolver, iter_causes, resolve, root_cause, root_cause_message
from faultlog.store import ErrorLogStore
from faultlog.summary import ErrorSummary
from faultlog.timestamps import TIMESTAMP_PATTERN, TIMESTAMP_WIDTH, format_timestamp, parse_timestamp

__all__ = [
    "CorruptRecordError",
    "ErrorLogStore",
    "ErrorResolver",
    "ErrorSummary",
    "FaultLogConfig",
    "FaultLogError",
    "InvalidArgumentError",
    "InvariantViolation",
    "LazyCell",
    "LogHandle",
    "LogRecord",
    "MalformedIdError",
    "NotFoundError",
    "PersistenceError",
    "RecordIOError",
    "TIMESTAMP_PATTERN",
    "TIMESTAMP_WIDTH",
    "UserFacingError",
    "decode_record",
    "encode_record",
    "format_timestamp",
    "iter_causes",
    "parse_timestamp",
    "resolve",
    "root_cause",
    "root_cause_message",
]
