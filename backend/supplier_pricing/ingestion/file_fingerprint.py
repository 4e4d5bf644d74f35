"""
File fingerprinting — content hash recorded with each upload.
"""

import hashlib


def compute_content_hash(data: bytes, algorithm: str = "sha256") -> str:
    """Hex digest of an uploaded file's bytes."""
    h = hashlib.new(algorithm)
    h.update(data)
    return h.hexdigest()
