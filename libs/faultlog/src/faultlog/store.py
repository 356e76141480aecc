"""Disk-backed store of timestamp-keyed error records.

Layout: one flat directory, one JSON file per record, named after the
record id (``yyyyMMddHHmmssSSS``). Records are written to a temp file in the
same directory and published with an exclusive hard link, so readers never
see a partial file and a published record is never overwritten.

The log directory must live on a filesystem that supports hard links. On
one that does not (some FAT and network mounts), every ``persist`` fails
with a ``PersistenceError`` whose detail names the missing hard-link
support; there is no non-atomic fallback.
"""

from __future__ import annotations

import errno
import logging
import os
import re
import tempfile
import traceback
from pathlib import Path

from faultlog.codec import encode_record
from faultlog.config import FaultLogConfig
from faultlog.errors import InvalidArgumentError, InvariantViolation, PersistenceError, RecordIOError
from faultlog.handle import LogHandle, RecordReader, read_record_file
from faultlog.resolver import exception_text
from faultlog.summary import ErrorSummary
from faultlog.timestamps import ONE_MILLISECOND, Clock, format_timestamp, is_record_name, system_clock

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"[0-9]+")

# link() errnos meaning the filesystem has no hard links.
_NO_HARDLINK_ERRNOS = frozenset({errno.EPERM, errno.ENOSYS, errno.EOPNOTSUPP, errno.ENOTSUP})


def format_detail(exc: BaseException) -> str:
    """Render the full traceback of *exc*, chained causes included."""
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def _discard_temp(tmp_path: str) -> None:
    # Listing skips leftover temp files.
    try:
        os.unlink(tmp_path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove temp file %s: %s", tmp_path, exc)


class ErrorLogStore:
    """Persist, list and look up error records under *log_dir*.

    Args:
        log_dir: Directory holding the record files. Created on first write.
        clock: Source of the current local time; record ids derive from it.
        reader: Function used by handles to read a record file.
    """

    def __init__(
        self,
        log_dir: str | Path,
        *,
        clock: Clock = system_clock,
        reader: RecordReader = read_record_file,
    ) -> None:
        self.log_dir = Path(log_dir)
        self._clock = clock
        self._reader = reader

    @classmethod
    def from_config(cls, config: FaultLogConfig, *, clock: Clock = system_clock) -> ErrorLogStore:
        return cls(config.log_dir, clock=clock)

    # ---- write path ----

    def persist(self, summary: ErrorSummary) -> ErrorSummary:
        """Write the exception behind *summary* as a new record.

        The record's abstract is the exception's own message and its detail
        is the full traceback. ``summary.record_id`` is set to the new id.

        Raises:
            InvariantViolation: If the summary carries no exception.
            PersistenceError: If the directory or file cannot be written.
        """
        cause = summary.cause
        if cause is None:
            raise InvariantViolation(f"Cannot persist error summary without a cause: {summary.message!r}")

        content = encode_record(exception_text(cause), format_detail(cause))
        self._ensure_dir()
        record_id = self._publish(content)
        summary.record_id = record_id
        logger.info("Logged %s as error record %s", type(cause).__name__, record_id)
        return summary

    def _ensure_dir(self) -> None:
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(operation="mkdir", detail=f"{self.log_dir}: {exc}", cause=exc) from exc

    def _publish(self, content: str) -> int:
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.log_dir, prefix=".record-", suffix=".tmp")
        except OSError as exc:
            raise PersistenceError(operation="write", detail=f"{self.log_dir}: {exc}", cause=exc) from exc
        try:
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(content)
            except OSError as exc:
                raise PersistenceError(operation="write", detail=f"{tmp_path}: {exc}", cause=exc) from exc
            return self._link_unique(tmp_path)
        finally:
            _discard_temp(tmp_path)

    def _link_unique(self, tmp_path: str) -> int:
        moment = self._clock()
        while True:
            name = format_timestamp(moment)
            try:
                os.link(tmp_path, self.log_dir / name)
            except FileExistsError:
                # Same-millisecond write; the next free millisecond keeps ids sortable.
                logger.warning("Error record %s already exists, trying the next millisecond", name)
                moment += ONE_MILLISECOND
                continue
            except OSError as exc:
                detail = str(exc)
                if exc.errno in _NO_HARDLINK_ERRNOS:
                    detail = f"{detail} (the filesystem holding {self.log_dir} may not support hard links)"
                raise PersistenceError(
                    operation="publish", record_id=int(name), detail=detail, cause=exc
                ) from exc
            return int(name)

    # ---- read path ----

    def list_records(self, limit: int | None = None) -> list[LogHandle]:
        """Return handles for all records, most recent first.

        Only directory entries are inspected; no record content is read.
        Entries whose name is not a 17-digit id, or that are not regular
        files, are skipped. A missing directory yields an empty list.

        Raises:
            RecordIOError: If the directory exists but cannot be scanned.
        """
        names: dict[int, str] = {}
        try:
            with os.scandir(self.log_dir) as entries:
                for entry in entries:
                    if not is_record_name(entry.name) or not entry.is_file():
                        logger.debug("Skipping non-record entry %s in %s", entry.name, self.log_dir)
                        continue
                    names[int(entry.name)] = entry.name
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise RecordIOError(f"Cannot list error records in {self.log_dir}: {exc}") from exc

        ordered = sorted(names, reverse=True)
        if limit is not None:
            ordered = ordered[: max(limit, 0)]
        return [self._handle(record_id, names[record_id]) for record_id in ordered]

    def get(self, record_id: str | int) -> LogHandle:
        """Return a lazy handle for *record_id* without touching the disk.

        Raises:
            InvalidArgumentError: If *record_id* is empty or not a decimal number.
        """
        text = str(record_id).strip() if record_id is not None else ""
        if not text:
            raise InvalidArgumentError("record_id must not be empty")
        if isinstance(record_id, bool) or _DIGITS_RE.fullmatch(text) is None:
            raise InvalidArgumentError(f"record_id must be a decimal number, got {text!r}")
        return self._handle(int(text), text)

    def _handle(self, record_id: int, name: str) -> LogHandle:
        return LogHandle(record_id, self.log_dir / name, reader=self._reader)
