"""
Utility package exports
"""

from repotriage.utils.hashing import sha256_hex
from repotriage.utils.archive import inspect_first_entry, is_archive_name, ARCHIVE_EXTENSIONS

__all__ = ["sha256_hex", "inspect_first_entry", "is_archive_name", "ARCHIVE_EXTENSIONS"]
