"""Decompress and unpack ``.tar.gz`` release archives.

Extraction happens in two stages. :func:`gunzip` turns the staged archive
into a plain tar file next to it, and :func:`untar` expands that tar file
into the installation root. Neither stage is transactional: a failure part
way through leaves whatever was already written in place.
"""

from __future__ import annotations

import gzip
import os
import struct
import tarfile
import zlib
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Optional

from goupgrade.core.errors import ArchiveFormatError, FileSystemError
from goupgrade.core.logging import get_logger

LOGGER = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024

# RFC 1952 header layout
GZIP_MAGIC = b"\x1f\x8b"
GZIP_DEFLATE = 8
FLAG_FEXTRA = 0x04
FLAG_FNAME = 0x08


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise ArchiveFormatError("truncated gzip header")
    return data


def _read_zero_terminated(stream: BinaryIO) -> bytes:
    chunks = []
    while True:
        byte = stream.read(1)
        if not byte:
            raise ArchiveFormatError("truncated gzip header")
        if byte == b"\x00":
            return b"".join(chunks)
        chunks.append(byte)


def read_gzip_name(stream: BinaryIO) -> Optional[str]:
    """Validate a gzip member header and return its embedded file name.

    Args:
        stream: Binary stream positioned at the start of the gzip member.

    Returns:
        The ``FNAME`` field decoded as Latin-1, or None when the header
        carries no name.

    Raises:
        ArchiveFormatError: If the header is not a valid gzip header.
    """
    header = _read_exact(stream, 10)
    if header[:2] != GZIP_MAGIC:
        raise ArchiveFormatError("not a gzip file (bad magic number)")
    if header[2] != GZIP_DEFLATE:
        raise ArchiveFormatError(f"unsupported gzip compression method {header[2]}")

    flags = header[3]
    if flags & FLAG_FEXTRA:
        (extra_len,) = struct.unpack("<H", _read_exact(stream, 2))
        _read_exact(stream, extra_len)

    name = None
    if flags & FLAG_FNAME:
        name = _read_zero_terminated(stream).decode("latin-1")
    return name or None


def decompressed_name(source: Path, embedded_name: Optional[str]) -> str:
    """Choose the file name for the decompressed output.

    The header's embedded name wins; only its final component is used so
    the output always lands directly in the target directory. Without one,
    the source name minus its ``.gz`` suffix is used.
    """
    if embedded_name:
        base = PurePosixPath(embedded_name.replace("\\", "/")).name
        if base not in ("", ".", ".."):
            return base
    if source.name.endswith(".gz"):
        return source.name[: -len(".gz")]
    return source.name + ".out"


def gunzip(source: Path, target_dir: Path) -> Path:
    """Decompress a gzip file into ``target_dir``.

    Args:
        source: Path to the ``.gz`` file.
        target_dir: Directory that receives the decompressed file.

    Returns:
        Path of the decompressed file.

    Raises:
        FileSystemError: If the source cannot be opened or the output
            cannot be written.
        ArchiveFormatError: If the gzip header or stream is invalid.
    """
    try:
        raw = open(source, "rb")
    except OSError as e:
        raise FileSystemError(f"error while opening {source}: {e}") from e

    with raw:
        try:
            embedded_name = read_gzip_name(raw)
            raw.seek(0)
        except OSError as e:
            raise FileSystemError(f"couldn't read {source}: {e}") from e

        target = target_dir / decompressed_name(source, embedded_name)
        LOGGER.debug(f"Decompressing {source} to {target}")

        try:
            out = open(target, "wb")
        except OSError as e:
            raise FileSystemError(f"error writing on {target}: {e}") from e

        with out, gzip.GzipFile(fileobj=raw, mode="rb") as archive:
            while True:
                try:
                    chunk = archive.read(CHUNK_SIZE)
                except gzip.BadGzipFile as e:
                    raise ArchiveFormatError(f"invalid gzip data in {source}: {e}") from e
                except (EOFError, zlib.error) as e:
                    raise ArchiveFormatError(f"corrupt gzip stream in {source}: {e}") from e
                except OSError as e:
                    raise FileSystemError(f"couldn't read {source}: {e}") from e
                if not chunk:
                    break
                try:
                    out.write(chunk)
                except OSError as e:
                    raise FileSystemError(f"error writing on {target}: {e}") from e

    return target


def _member_path(target_root: Path, member: tarfile.TarInfo) -> Path:
    name = PurePosixPath(member.name)
    if name.is_absolute() or ".." in name.parts:
        raise ArchiveFormatError(f"Unsafe path in archive: {member.name}")
    return target_root.joinpath(*name.parts)


def _extract_directory(path: Path, mode: int) -> None:
    try:
        os.makedirs(path, mode=mode, exist_ok=True)
        os.chmod(path, mode)
    except OSError as e:
        raise FileSystemError(f"couldn't write directory {path}: {e}") from e


def _extract_file(tar: tarfile.TarFile, member: tarfile.TarInfo, path: Path, mode: int) -> None:
    source = tar.extractfile(member)
    if source is None:
        raise ArchiveFormatError(f"no data for {member.name}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_CREAT | os.O_TRUNC | os.O_WRONLY, mode)
    except OSError as e:
        raise FileSystemError(f"couldn't open file {path}: {e}") from e

    with source, os.fdopen(fd, "wb") as out:
        while True:
            try:
                chunk = source.read(CHUNK_SIZE)
            except tarfile.TarError as e:
                raise ArchiveFormatError(f"couldn't read {member.name}: {e}") from e
            except OSError as e:
                raise FileSystemError(f"couldn't read {member.name}: {e}") from e
            if not chunk:
                break
            try:
                out.write(chunk)
            except OSError as e:
                raise FileSystemError(f"couldn't write on file {path}: {e}") from e

    try:
        os.chmod(path, mode)
    except OSError as e:
        raise FileSystemError(f"couldn't set mode on {path}: {e}") from e


def untar(source: Path, target_root: Path) -> int:
    """Unpack a tar file into ``target_root``, in stream order.

    Directories are created idempotently. Regular files are created or
    truncated and their bytes copied verbatim. Both receive the entry's mode
    bits exactly, independent of the process umask. Other entry kinds are
    skipped.

    Args:
        source: Path to the uncompressed tar file.
        target_root: Directory the entries are written under.

    Returns:
        Number of directories and files written.

    Raises:
        FileSystemError: If the source cannot be opened or any entry cannot
            be written.
        ArchiveFormatError: If the tar stream is malformed or an entry
            points outside ``target_root``.
    """
    try:
        raw = open(source, "rb")
    except OSError as e:
        raise FileSystemError(f"couldn't open file {source}: {e}") from e

    written = 0
    with raw:
        try:
            tar = tarfile.open(fileobj=raw, mode="r|")
        except tarfile.TarError as e:
            raise ArchiveFormatError(f"couldn't read {source}: {e}") from e

        with tar:
            members = iter(tar)
            while True:
                try:
                    member = next(members)
                except StopIteration:
                    break
                except tarfile.TarError as e:
                    raise ArchiveFormatError(f"couldn't read {source}: {e}") from e
                except OSError as e:
                    raise FileSystemError(f"couldn't read {source}: {e}") from e

                path = _member_path(target_root, member)
                mode = member.mode & 0o7777

                if path == target_root:
                    # "./" entries would re-mode the installation root itself
                    LOGGER.debug(f"Skipping archive root entry {member.name!r}")
                    continue
                if member.isdir():
                    _extract_directory(path, mode)
                elif member.isreg():
                    _extract_file(tar, member, path, mode)
                else:
                    LOGGER.debug(f"Skipping unsupported entry {member.name} (type {member.type!r})")
                    continue
                written += 1

    LOGGER.info(f"Extracted {written} entries from {source} into {target_root}")
    return written
