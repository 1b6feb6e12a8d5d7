import io
import os
from datetime import datetime

import pytest

from archive_explorer import settings
from archive_explorer.errors import DecodeError, UnsupportedFileError
from archive_explorer.upload import (
    is_archive_upload,
    load_archive,
    load_archive_upload,
    read_upload,
    upload_modified_time,
    validate_upload,
)


@pytest.mark.parametrize(
    "name, media_type, expected",
    [
        ("data.zip", "application/zip", True),
        ("DATA.ZIP", "application/x-zip-compressed", True),
        ("data.zip", "", True),
        ("data.zip", None, True),
        ("data.zip", "text/plain", False),
        ("data.tar.gz", "application/zip", False),
        ("", "application/zip", False),
        (None, None, False),
    ],
)
def test_is_archive_upload(name, media_type, expected):
    assert is_archive_upload(name, media_type) is expected


def test_validate_rejects_empty_and_oversized():
    with pytest.raises(UnsupportedFileError, match="Empty"):
        validate_upload("data.zip", "application/zip", 0)
    with pytest.raises(UnsupportedFileError, match="too large"):
        validate_upload("data.zip", "application/zip", settings.MAX_UPLOAD_BYTES + 1)


def test_load_archive_rejects_before_walking(monkeypatch, sample_zip):
    calls = []
    monkeypatch.setattr("archive_explorer.upload.walk_archive", lambda *a, **k: calls.append(a))

    with pytest.raises(UnsupportedFileError):
        load_archive("data.csv", sample_zip)
    assert calls == []


def test_load_archive_walks_valid_upload(sample_zip):
    tree = load_archive("data.zip", sample_zip, modified_by="Ann")
    assert tree.name == "data"
    assert tree.modified_by == "Ann"


def test_load_archive_surfaces_decode_errors():
    with pytest.raises(DecodeError):
        load_archive("broken.zip", b"garbage bytes")


def test_read_upload_from_path_and_file_object(tmp_path, sample_zip):
    path = tmp_path / "bundle.zip"
    path.write_bytes(sample_zip)

    assert read_upload(str(path)) == ("bundle.zip", sample_zip)

    stream = io.BytesIO(sample_zip)
    stream.name = "stream.zip"
    stream.read(3)
    assert read_upload(stream) == ("stream.zip", sample_zip)


def test_read_upload_requires_a_file():
    with pytest.raises(UnsupportedFileError):
        read_upload(None)


def test_load_archive_upload_from_path(tmp_path, sample_zip):
    path = tmp_path / "bundle.zip"
    path.write_bytes(sample_zip)
    tree = load_archive_upload(str(path))
    assert tree.name == "bundle"
    assert tree.modified_by == settings.DEFAULT_MODIFIED_BY


def test_root_folder_takes_upload_modification_time(tmp_path, sample_zip):
    path = tmp_path / "dated.zip"
    path.write_bytes(sample_zip)
    stamp = datetime(2021, 3, 4, 5, 6, 7).timestamp()
    os.utime(path, (stamp, stamp))

    assert upload_modified_time(str(path)) == datetime(2021, 3, 4, 5, 6, 7)
    assert load_archive_upload(str(path)).created_at == datetime(2021, 3, 4, 5, 6, 7)


def test_upload_modified_time_without_a_file_on_disk(sample_zip):
    stream = io.BytesIO(sample_zip)
    stream.name = "nowhere/stream.zip"
    assert upload_modified_time(stream) is None
    assert upload_modified_time(None) is None
