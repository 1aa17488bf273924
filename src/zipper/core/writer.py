"""ZIP archive writer for files on disk and in-memory buffers.

``ArchiveWriter`` streams every input through a fixed-size buffer into a
standard ZIP archive. Disk inputs may have a path prefix stripped from their
entry names (see :func:`zipper.core.naming.entry_name`); in-memory inputs are
stored under their mapping keys.

Failures abort the whole call. A destination written to before the failure
is left as is and is usually not a readable archive; removing it is up to
the caller.
"""

from __future__ import annotations

import io
import logging
import os
import stat
import time
from dataclasses import asdict, dataclass
from typing import Any, BinaryIO, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from zipfile import ZipFile, ZipInfo

from zipper.core.checksum import DigestSink
from zipper.core.naming import entry_name
from zipper.core.options import StorageMethod, ZipOptions
from zipper.utils.io import copy_stream

logger = logging.getLogger(__name__)

PathInput = Union[str, "os.PathLike[str]"]
Inputs = Union[Iterable[PathInput], Mapping[str, bytes]]


class ArchiveWriteError(OSError):
    """An archive could not be written, or one of its inputs could not be read."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class ArchiveResult:
    entries: Tuple[str, ...]
    size: int
    sha256: str
    crc32: int

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["entries"] = list(self.entries)
        return data


@dataclass(frozen=True)
class _Source:
    name: str
    origin: str
    open: Callable[[], BinaryIO]
    on_disk: bool


def _plan(inputs: Inputs, prefix: Optional[str]) -> Iterator[_Source]:
    if isinstance(inputs, Mapping):
        for key, data in inputs.items():
            yield _Source(key, key, lambda data=data: io.BytesIO(data), False)
    else:
        for path in inputs:
            origin = os.fspath(path)
            yield _Source(entry_name(origin, prefix), origin, lambda origin=origin: open(origin, "rb"), True)


def _entry_info(source: _Source, reader: BinaryIO, compression: int) -> ZipInfo:
    """Describe an entry up front so zipfile can pick ZIP64 before writing it."""
    if source.on_disk:
        st = os.fstat(reader.fileno())
        date_time = time.localtime(st.st_mtime)[:6]
        mode = st.st_mode & 0xFFFF
        size = st.st_size
    else:
        date_time = time.localtime()[:6]
        mode = stat.S_IFREG | 0o644
        with reader.getbuffer() as buffer:
            size = len(buffer)
    if date_time[0] < 1980:
        date_time = (1980, 1, 1, 0, 0, 0)
    elif date_time[0] > 2107:
        date_time = (2107, 12, 31, 23, 59, 59)

    info = ZipInfo(source.name, date_time)
    info.external_attr = mode << 16
    info.file_size = size
    info.compress_type = compression
    return info


def _check_inputs(inputs: Inputs) -> None:
    if isinstance(inputs, (str, bytes, bytearray)):
        raise TypeError("inputs must be a collection of paths or a mapping of names to bytes, not a single string")


class ArchiveWriter:
    """Create ZIP archives from file paths or ``name -> bytes`` mappings.

    Options are immutable; :meth:`configure` swaps in a new value and every
    compress call works on the value current when it started.
    """

    def __init__(self, options: Optional[ZipOptions] = None, **overrides: Any) -> None:
        self.options = (options or ZipOptions()).replace(**overrides)

    def configure(
        self,
        buffer_size: Optional[int] = None,
        storage_method: Optional[Union[StorageMethod, str]] = None,
        prefix: Optional[str] = None,
    ) -> ZipOptions:
        """Override any of the current options; ``None`` keeps a field as is."""
        self.options = self.options.replace(
            buffer_size=buffer_size,
            storage_method=storage_method,
            prefix=prefix,
        )
        return self.options

    def clear_prefix(self) -> ZipOptions:
        self.options = ZipOptions(self.options.buffer_size, self.options.storage_method, None)
        return self.options

    def compress_to_file(
        self,
        output_path: PathInput,
        inputs: Inputs,
        options: Optional[ZipOptions] = None,
    ) -> ArchiveResult:
        """Write an archive of ``inputs`` to ``output_path``, replacing any existing file."""
        _check_inputs(inputs)
        destination = os.fspath(output_path)
        try:
            handle = open(destination, "wb")
        except OSError as exc:
            logger.error("Cannot open archive destination %s: %s", destination, exc)
            raise ArchiveWriteError(f"Cannot open archive destination {destination}: {exc}", destination) from exc

        with handle:
            return self.compress_to_stream(handle, inputs, options)

    def compress_to_stream(
        self,
        out_stream: BinaryIO,
        inputs: Inputs,
        options: Optional[ZipOptions] = None,
    ) -> ArchiveResult:
        """Write an archive of ``inputs`` to ``out_stream``.

        The stream is flushed but left open. It does not need to be seekable.
        """
        _check_inputs(inputs)
        opts = options or self.options
        sink = DigestSink(out_stream)
        names: List[str] = []
        target = getattr(out_stream, "name", "<stream>")

        logger.info(
            "Writing archive to %s (method=%s, buffer=%d, prefix=%r)",
            target,
            opts.storage_method.name,
            opts.buffer_size,
            opts.prefix,
        )
        try:
            with ZipFile(sink, "w", compression=opts.storage_method.compression) as archive:
                for source in _plan(inputs, opts.prefix):
                    self._add(archive, source, opts.buffer_size)
                    names.append(source.name)
            sink.flush()
        except ArchiveWriteError:
            raise
        except OSError as exc:
            logger.error("Archive write to %s failed: %s", target, exc)
            raise ArchiveWriteError(f"Archive write to {target} failed: {exc}") from exc

        result = ArchiveResult(tuple(names), sink.size, sink.sha256, sink.crc32)
        logger.info("Archive %s: %d entries, %d bytes, sha256=%s", target, len(names), result.size, result.sha256)
        return result

    @staticmethod
    def _add(archive: ZipFile, source: _Source, buffer_size: int) -> None:
        try:
            with source.open() as reader:
                info = _entry_info(source, reader, archive.compression)
                with archive.open(info, "w") as entry:
                    copied = copy_stream(reader, entry, buffer_size)
        except OSError as exc:
            logger.error("Cannot add %s to archive: %s", source.origin, exc)
            raise ArchiveWriteError(f"Cannot add {source.origin} to archive: {exc}", source.origin) from exc
        logger.debug("Added %s as %s (%d bytes)", source.origin, source.name, copied)
