"""
Content hashing helpers.
"""

import hashlib


def sha256_hex(content: bytes) -> str:
    """Return the lowercase hex SHA-256 digest of ``content``."""
    return hashlib.sha256(content).hexdigest()
