"""Shared fixtures for goupgrade unit tests."""

from __future__ import annotations

import gzip
import io
import logging
import tarfile
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Tuple, Union

import pytest

# (name, mode, data); data None marks a directory
ArchiveEntry = Tuple[str, int, Union[bytes, None]]

GO_ARCHIVE_ENTRIES: List[ArchiveEntry] = [
    ("go", 0o755, None),
    ("go/VERSION", 0o644, b"go1.23.1\ntime 2024-09-04T21:02:48Z\n"),
    ("go/bin", 0o755, None),
    ("go/bin/go", 0o755, b"\x7fELF fake go binary"),
    ("go/bin/gofmt", 0o750, b"\x7fELF fake gofmt binary"),
    ("go/src", 0o755, None),
    ("go/src/README.md", 0o444, b"The Go source tree.\n"),
]


class FakeHttpClient:
    """Stands in for HttpClient, serving canned bodies and recording URLs.

    A response may be bytes (served as the body) or an exception instance
    (raised when the URL is requested).
    """

    def __init__(self, responses: Dict[str, Union[bytes, Exception]]):
        self.responses = responses
        self.calls: List[str] = []

    @contextmanager
    def get(self, url: str) -> Iterator[io.BytesIO]:
        self.calls.append(url)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        yield io.BytesIO(response)


def build_tar_gz(entries: List[ArchiveEntry], gzip_name: str = "archive.tar") -> bytes:
    """Build a gzip-compressed tar archive in memory."""
    tar_buffer = io.BytesIO()
    with tarfile.open(fileobj=tar_buffer, mode="w", format=tarfile.PAX_FORMAT) as tar:
        for name, mode, data in entries:
            info = tarfile.TarInfo(name)
            info.mode = mode
            info.mtime = 0
            if data is None:
                info.type = tarfile.DIRTYPE
                tar.addfile(info)
            else:
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))

    gz_buffer = io.BytesIO()
    with gzip.GzipFile(filename=gzip_name, mode="wb", fileobj=gz_buffer, mtime=0) as gz:
        gz.write(tar_buffer.getvalue())
    return gz_buffer.getvalue()


@pytest.fixture
def fake_client() -> Callable[[Dict[str, Union[bytes, Exception]]], FakeHttpClient]:
    """Factory for FakeHttpClient instances."""
    return FakeHttpClient


@pytest.fixture
def go_archive() -> bytes:
    """A small go1.23.1 linux-amd64 style archive."""
    return build_tar_gz(GO_ARCHIVE_ENTRIES, gzip_name="go1.23.1.linux-amd64.tar")


@pytest.fixture
def tar_gz_builder() -> Callable[..., bytes]:
    """Expose build_tar_gz to tests that need custom archives."""
    return build_tar_gz


@pytest.fixture
def go_archive_entries() -> List[ArchiveEntry]:
    return list(GO_ARCHIVE_ENTRIES)


@pytest.fixture(autouse=True)
def reset_goupgrade_logger() -> Iterator[None]:
    """Undo configure_logging() so caplog keeps seeing records."""
    yield
    logger = logging.getLogger("goupgrade")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
