"""Typer-based CLI for building ZIP archives."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import typer
from rich import print
from rich.markup import escape

from zipper.core.job import JobError, load_job, run_job
from zipper.core.options import StorageMethod, ZipOptions
from zipper.core.writer import ArchiveWriteError, ArchiveWriter

app = typer.Typer(add_completion=False, help="ZIP archive builder")
logger = logging.getLogger("zipper")


def _setup_logging(verbose: bool) -> None:
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=logging.INFO,
            format="[%(levelname)s] %(message)s",
            stream=sys.stdout,
        )
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _options(stored: bool, buffer_size: int, prefix: Optional[str] = None) -> ZipOptions:
    method = StorageMethod.STORED if stored else StorageMethod.DEFLATED
    try:
        return ZipOptions(buffer_size=buffer_size, storage_method=method, prefix=prefix)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _report(summary: Dict[str, Any]) -> None:
    print("[green]OK[/] →", json.dumps(summary, ensure_ascii=False, indent=2))


def _fail(exc: Exception) -> NoReturn:
    print(f"[red]FAILED[/] {escape(str(exc))}")
    raise typer.Exit(code=1)


@app.command()
def pack(
    output: Path = typer.Argument(..., help="Archive to create"),
    inputs: List[str] = typer.Argument(..., help="Files to add"),
    prefix: Optional[str] = typer.Option(None, "--prefix", "-p", help="Remove this prefix from entry names"),
    stored: bool = typer.Option(False, "--stored", help="Store entries without compression"),
    buffer_size: int = typer.Option(2048, "--buffer-size", help="Read buffer size in bytes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Упаковать файлы с диска в ZIP."""
    _setup_logging(verbose)
    writer = ArchiveWriter(_options(stored, buffer_size, prefix))
    try:
        result = writer.compress_to_file(output, inputs)
    except ArchiveWriteError as exc:
        _fail(exc)
    _report({"output": str(output), **result.to_dict()})


@app.command(name="bytes")
def pack_bytes(
    output: Path = typer.Argument(..., help="Archive to create"),
    pairs: List[str] = typer.Argument(..., help="NAME=FILE pairs; FILE is read into memory"),
    stored: bool = typer.Option(False, "--stored", help="Store entries without compression"),
    buffer_size: int = typer.Option(2048, "--buffer-size", help="Read buffer size in bytes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Упаковать содержимое, загруженное в память, под заданными именами."""
    _setup_logging(verbose)
    entries: Dict[str, bytes] = {}
    for pair in pairs:
        name, sep, source = pair.partition("=")
        if not sep or not name or not source:
            raise typer.BadParameter(f"Expected NAME=FILE, got {pair!r}")
        try:
            entries[name] = Path(source).read_bytes()
        except OSError as exc:
            _fail(exc)

    writer = ArchiveWriter(_options(stored, buffer_size))
    try:
        result = writer.compress_to_file(output, entries)
    except ArchiveWriteError as exc:
        _fail(exc)
    _report({"output": str(output), **result.to_dict()})


@app.command()
def make(
    job: Path = typer.Argument(..., exists=True, help="YAML job path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Собрать архив по YAML-описанию задачи."""
    _setup_logging(verbose)
    try:
        summary = run_job(load_job(job))
    except (JobError, ArchiveWriteError) as exc:
        _fail(exc)
    _report(summary)


if __name__ == "__main__":
    try:
        app()
    except Exception:  # pragma: no cover - top-level CLI guard
        logger.exception("zipper CLI failed")
        raise
