"""Archive writer configuration."""

from __future__ import annotations

from dataclasses import dataclass, replace as dc_replace
from enum import Enum
from typing import Any, Optional, Union
from zipfile import ZIP_DEFLATED, ZIP_STORED

DEFAULT_BUFFER_SIZE = 2048


class StorageMethod(Enum):
    """How entry content is stored in the archive."""

    STORED = ZIP_STORED
    DEFLATED = ZIP_DEFLATED

    @property
    def compression(self) -> int:
        return self.value

    @classmethod
    def parse(cls, value: Union[str, int, "StorageMethod"]) -> "StorageMethod":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown storage method: {value!r}") from None
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"Unknown storage method: {value!r}") from None
        raise ValueError(f"Unknown storage method: {value!r}")


@dataclass(frozen=True)
class ZipOptions:
    buffer_size: int = DEFAULT_BUFFER_SIZE
    storage_method: StorageMethod = StorageMethod.DEFLATED
    prefix: Optional[str] = None

    def __post_init__(self) -> None:
        size = self.buffer_size
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ValueError(f"buffer_size must be a positive integer, got {size!r}")
        # frozen: go through object.__setattr__ to normalise the enum
        object.__setattr__(self, "storage_method", StorageMethod.parse(self.storage_method))
        if self.prefix is not None and not isinstance(self.prefix, str):
            raise ValueError(f"prefix must be a string, got {self.prefix!r}")

    def replace(self, **changes: Any) -> "ZipOptions":
        """Return a copy with ``changes`` applied, skipping ``None`` values."""
        return dc_replace(self, **{key: value for key, value in changes.items() if value is not None})
