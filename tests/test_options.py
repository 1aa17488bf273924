import dataclasses
import zipfile

import pytest

from zipper.core.options import DEFAULT_BUFFER_SIZE, StorageMethod, ZipOptions


def test_defaults():
    options = ZipOptions()
    assert options.buffer_size == DEFAULT_BUFFER_SIZE == 2048
    assert options.storage_method is StorageMethod.DEFLATED
    assert options.prefix is None


@pytest.mark.parametrize(
    "value, expected",
    [
        ("stored", StorageMethod.STORED),
        (" DEFLATED ", StorageMethod.DEFLATED),
        (zipfile.ZIP_STORED, StorageMethod.STORED),
        (StorageMethod.DEFLATED, StorageMethod.DEFLATED),
    ],
)
def test_parse_storage_method(value, expected):
    assert StorageMethod.parse(value) is expected


@pytest.mark.parametrize("value", ["bzip2", zipfile.ZIP_LZMA, True, None])
def test_parse_storage_method_rejects_unknown(value):
    with pytest.raises(ValueError):
        StorageMethod.parse(value)


def test_storage_method_maps_to_zipfile_constants():
    assert StorageMethod.STORED.compression == zipfile.ZIP_STORED
    assert StorageMethod.DEFLATED.compression == zipfile.ZIP_DEFLATED


@pytest.mark.parametrize("size", [0, -1, 1.5, "2048", True])
def test_invalid_buffer_size(size):
    with pytest.raises(ValueError):
        ZipOptions(buffer_size=size)


def test_invalid_prefix():
    with pytest.raises(ValueError):
        ZipOptions(prefix=3)


def test_options_are_frozen():
    options = ZipOptions()
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.buffer_size = 10


def test_replace_skips_none_and_validates():
    options = ZipOptions(buffer_size=64, prefix="a/")

    changed = options.replace(storage_method="stored", prefix=None)

    assert changed == ZipOptions(64, StorageMethod.STORED, "a/")
    assert options.storage_method is StorageMethod.DEFLATED
    with pytest.raises(ValueError):
        options.replace(buffer_size=0)
