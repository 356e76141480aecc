"""Capture a failure, hand the user a correlation code, then look the record up again.

Run from the repository root:

    python examples/capture/01_capture_and_browse.py

Records are written to ./logs/syserrs (or $FAULTLOG_LOG_ROOT/syserrs).
"""

from __future__ import annotations

import logging

from faultlog import ErrorLogStore, FaultLogConfig, UserFacingError, resolve


class ReportExportError(UserFacingError):
    """The report could not be exported."""


def export_report(path: str) -> None:
    try:
        open(path, encoding="utf-8").read()
    except OSError as exc:
        raise ReportExportError(f"Report template '{path}' is unavailable") from exc


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    store = ErrorLogStore.from_config(FaultLogConfig.from_file())

    try:
        try:
            export_report("/no/such/template.html")
        except ReportExportError as exc:
            raise RuntimeError("export job failed") from exc
    except RuntimeError as exc:
        summary = resolve(exc).write_log(store)

    print(f"Shown to the user: {summary.message} (code {summary.record_id})")

    for handle in store.list_records(limit=5):
        print(f"{handle.record_id}  {handle.create_time:%Y-%m-%d %H:%M:%S}  {handle.abstract_info}")

    detail = store.get(summary.record_id).detail
    print("\n" + detail)


if __name__ == "__main__":
    main()
