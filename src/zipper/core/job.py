"""Config-driven archive jobs."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from zipper.core.options import ZipOptions
from zipper.core.writer import ArchiveWriter
from zipper.utils.io import ensure_dirs


class JobError(ValueError):
    """A job description is missing keys or has values of the wrong type."""


def load_job(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML job file and validate it."""
    with open(path, "r", encoding="utf-8") as handle:
        try:
            cfg = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise JobError(f"Invalid YAML in {path}: {exc}") from exc
    return validate_job(cfg)


def validate_job(cfg: Any) -> Dict[str, Any]:
    if not isinstance(cfg, Mapping):
        raise JobError("Job must be a mapping")
    output = cfg.get("output")
    if not isinstance(output, str) or not output:
        raise JobError("Job needs an 'output' path")

    has_inputs = "inputs" in cfg
    has_entries = "entries" in cfg
    if has_inputs == has_entries:
        raise JobError("Job needs exactly one of 'inputs' or 'entries'")

    if has_inputs:
        inputs = cfg["inputs"]
        if not isinstance(inputs, list) or not all(isinstance(item, str) for item in inputs):
            raise JobError("'inputs' must be a list of paths")
    else:
        entries = cfg["entries"]
        if not isinstance(entries, Mapping) or not all(
            isinstance(name, str) and isinstance(content, (str, bytes)) for name, content in entries.items()
        ):
            raise JobError("'entries' must map entry names to text")

    try:
        options_from_job(cfg)
    except ValueError as exc:
        raise JobError(str(exc)) from exc
    return dict(cfg)


def options_from_job(cfg: Mapping[str, Any], base: Optional[ZipOptions] = None) -> ZipOptions:
    return (base or ZipOptions()).replace(
        buffer_size=cfg.get("buffer_size"),
        storage_method=cfg.get("storage_method"),
        prefix=cfg.get("prefix"),
    )


def _entries(raw: Mapping[str, Union[str, bytes]]) -> Dict[str, bytes]:
    return {name: content.encode("utf-8") if isinstance(content, str) else content for name, content in raw.items()}


def run_job(cfg: Mapping[str, Any], writer: Optional[ArchiveWriter] = None) -> Dict[str, Any]:
    """Execute a validated job and return a JSON-serialisable summary."""
    writer = writer or ArchiveWriter()
    options = options_from_job(cfg, writer.options)
    output = Path(cfg["output"])
    ensure_dirs([output.parent])

    if "inputs" in cfg:
        inputs: Union[List[str], Dict[str, bytes]] = list(cfg["inputs"])
    else:
        inputs = _entries(cfg["entries"])

    result = writer.compress_to_file(output, inputs, options)
    summary: Dict[str, Any] = {
        "output": str(output),
        "time": datetime.now().isoformat(timespec="seconds"),
    }
    summary.update(result.to_dict())
    return summary
