"""
Archive Inspector

Reads the first entry of an in-memory archive and fingerprints it.

Supported containers:
- ZIP
- tar (plain or gzip/bz2/xz compressed)

The first entry is taken in the archive's own order. Samples of the
distribution pattern this tool looks for ship a single payload file, so no
sorting or filtering is applied.
"""

import io
import logging
import lzma
import tarfile
import zipfile
import zlib
from typing import Tuple

from repotriage.errors import InspectionError
from repotriage.utils.hashing import sha256_hex

logger = logging.getLogger(__name__)

ARCHIVE_EXTENSIONS = (".zip", ".tar")


def is_archive_name(name: str) -> bool:
    """Case-sensitive check for an archive file extension."""
    return name.endswith(ARCHIVE_EXTENSIONS)


def inspect_first_entry(content: bytes) -> Tuple[str, str]:
    """
    Extract the first entry of an archive and hash its decompressed bytes.

    Args:
        content: Raw archive bytes

    Returns:
        (entry_name, entry_sha256). Both are empty strings when the archive
        holds no entries.

    Raises:
        InspectionError: If the payload is not a readable ZIP or tar archive
    """
    buffer = io.BytesIO(content)

    if zipfile.is_zipfile(buffer):
        buffer.seek(0)
        return _first_zip_entry(buffer)

    buffer.seek(0)
    return _first_tar_entry(buffer)


def _first_zip_entry(buffer: io.BytesIO) -> Tuple[str, str]:
    try:
        with zipfile.ZipFile(buffer) as archive:
            entries = archive.infolist()
            if not entries:
                logger.debug("ZIP archive has no entries")
                return "", ""

            first = entries[0]
            data = archive.read(first)
            logger.debug(f"First ZIP entry: {first.filename} ({len(data)} bytes)")
            return first.filename, sha256_hex(data)

    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        zlib.error,
        lzma.LZMAError,
        EOFError,
        OSError,
    ) as e:
        # OSError covers corrupt bzip2 streams
        raise InspectionError(f"failed to read zip archive: {e}") from e
    except (RuntimeError, NotImplementedError) as e:
        # Encrypted entries or unsupported compression methods
        raise InspectionError(f"unable to extract zip entry: {e}") from e


def _first_tar_entry(buffer: io.BytesIO) -> Tuple[str, str]:
    try:
        with tarfile.open(fileobj=buffer, mode="r:*") as archive:
            first = archive.next()
            if first is None:
                logger.debug("tar archive has no entries")
                return "", ""

            stream = archive.extractfile(first) if first.isfile() else None
            data = stream.read() if stream is not None else b""
            logger.debug(f"First tar entry: {first.name} ({len(data)} bytes)")
            return first.name, sha256_hex(data)

    except (tarfile.TarError, zlib.error, lzma.LZMAError, EOFError, OSError) as e:
        raise InspectionError(f"failed to read tar archive: {e}") from e
