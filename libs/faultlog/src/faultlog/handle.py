"""Lazy, memoized access to one persisted error record."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from faultlog.codec import LogRecord, decode_record
from faultlog.errors import CorruptRecordError, NotFoundError, RecordIOError
from faultlog.lazy import LazyCell
from faultlog.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

RecordReader = Callable[[Path], str]


def read_record_file(path: Path) -> str:
    return path.read_text(encoding="utf-8")


class LogHandle:
    """A record id bound to its file, read on first use.

    Constructing a handle never touches the disk, so a handle can exist for a
    record that does not. The first access to :attr:`detail` or
    :attr:`abstract_info` reads and decodes the file once; later accesses,
    from any thread, reuse that result.
    """

    def __init__(self, record_id: int, path: Path, *, reader: RecordReader = read_record_file) -> None:
        self.record_id = record_id
        self.path = path
        self._reader = reader
        self._record: LazyCell[LogRecord] = LazyCell(self._load)

    def __repr__(self) -> str:
        return f"LogHandle(record_id={self.record_id}, loaded={self.loaded})"

    @property
    def loaded(self) -> bool:
        return self._record.ready

    @property
    def detail(self) -> str:
        """Full trace text of the logged exception."""
        return self._record.get().detail

    @property
    def abstract_info(self) -> str:
        """The logged exception's own message."""
        return self._record.get().abstract

    @property
    def create_time(self) -> datetime:
        """Parse the record id back into the time it was written.

        Raises:
            MalformedIdError: If the id is not a valid ``yyyyMMddHHmmssSSS`` key.
        """
        return parse_timestamp(self.record_id)

    def to_payload(self, *, include_detail: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "record_id": str(self.record_id),
            "create_time": self.create_time.isoformat(timespec="milliseconds"),
            "abstract_info": self.abstract_info,
        }
        if include_detail:
            payload["detail"] = self.detail
        return payload

    def _load(self) -> LogRecord:
        logger.debug("Loading error record %s from %s", self.record_id, self.path)
        try:
            text = self._reader(self.path)
        except FileNotFoundError as exc:
            raise NotFoundError(self.record_id, str(self.path)) from exc
        except UnicodeDecodeError as exc:
            raise CorruptRecordError(f"Error record {self.record_id} is not valid UTF-8") from exc
        except OSError as exc:
            raise RecordIOError(f"Cannot read error record {self.record_id}: {exc}") from exc
        return decode_record(text)
