"""Write-through digest layer for archive output."""

from __future__ import annotations

import hashlib
import zlib
from typing import BinaryIO


class DigestSink:
    """Forward writes to ``stream`` while hashing and counting them.

    Short writes from raw streams are retried until the whole chunk is
    sent. The sink has no ``seek``: ``zipfile`` then writes every
    entry in streaming form, so the digest covers exactly the bytes that
    reached the stream, in order.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._sha256 = hashlib.sha256()
        self._crc32 = 0
        self.size = 0

    def write(self, data: bytes) -> int:
        view = memoryview(data).cast("B")
        offset = 0
        # raw streams may accept only part of a write; keep sending the rest
        while offset < len(view):
            written = self._stream.write(view[offset:])
            if written is None:
                written = len(view) - offset
            elif written <= 0:
                raise OSError(f"Archive stream accepted no data ({offset} of {len(view)} bytes written)")
            offset += written
        self._sha256.update(view)
        self._crc32 = zlib.crc32(view, self._crc32)
        self.size += len(view)
        return len(view)

    def tell(self) -> int:
        return self.size

    def flush(self) -> None:
        self._stream.flush()

    @property
    def sha256(self) -> str:
        return self._sha256.hexdigest()

    @property
    def crc32(self) -> int:
        return self._crc32 & 0xFFFFFFFF
