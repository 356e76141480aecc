"""faultlog CLI — inspect persisted error records."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

from faultlog.config import DEFAULT_CONFIG_PATH, FaultLogConfig
from faultlog.errors import FaultLogError, InvalidArgumentError, MalformedIdError
from faultlog.store import ErrorLogStore

app = typer.Typer(name="faultlog", help="Browse error records captured by faultlog.", no_args_is_help=True)


def _setup_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(asctime)s] [faultlog] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
    logger = logging.getLogger("faultlog")
    logger.handlers = [handler]
    logger.propagate = False
    logger.setLevel(logging.INFO if verbose else logging.WARNING)


def _load_store(root: Path, config: Path | None) -> ErrorLogStore:
    config_path = config if config is not None else root / DEFAULT_CONFIG_PATH
    try:
        cfg = FaultLogConfig.from_file(config_path)
    except (OSError, ValueError) as exc:  # ValueError covers JSONDecodeError and pydantic ValidationError
        typer.echo(f"Invalid config {config_path}: {exc}", err=True)
        raise typer.Exit(code=1)
    if not cfg.log_root.is_absolute():
        cfg = cfg.model_copy(update={"log_root": root / cfg.log_root})
    return ErrorLogStore.from_config(cfg)


_ROOT_OPTION = typer.Option(Path("."), "--root", "-r", help="Project root directory.")
_CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Config file (default: <root>/.faultlog/config.json).")
_VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Log store activity to stderr.")


@app.command("list")
def list_cmd(
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Show at most N records."),
    root: Path = _ROOT_OPTION,
    config: Path | None = _CONFIG_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """List error record ids, most recent first."""
    _setup_logging(verbose)
    store = _load_store(root, config)
    try:
        handles = store.list_records(limit=limit)
    except FaultLogError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    if not handles:
        typer.echo(f"No error records in {store.log_dir}")
        return
    for handle in handles:
        try:
            created = handle.create_time.isoformat(sep=" ", timespec="milliseconds")
        except MalformedIdError:
            created = "?"
        typer.echo(f"{handle.record_id}  {created}")


@app.command()
def show(
    record_id: str = typer.Argument(..., help="Record id as printed by 'faultlog list'."),
    abstract_only: bool = typer.Option(False, "--abstract-only", "-a", help="Print only the abstract line."),
    root: Path = _ROOT_OPTION,
    config: Path | None = _CONFIG_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Print the abstract and full trace of one error record."""
    _setup_logging(verbose)
    store = _load_store(root, config)
    try:
        handle = store.get(record_id)
        abstract = handle.abstract_info
        detail = None if abstract_only else handle.detail
    except InvalidArgumentError as exc:
        typer.echo(f"Invalid record id: {exc}", err=True)
        raise typer.Exit(code=1)
    except FaultLogError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(abstract)
    if detail is not None:
        typer.echo("")
        typer.echo(detail.rstrip("\n"))


@app.command()
def path(
    root: Path = _ROOT_OPTION,
    config: Path | None = _CONFIG_OPTION,
) -> None:
    """Print the directory error records are stored in."""
    store = _load_store(root, config)
    typer.echo(str(store.log_dir))
