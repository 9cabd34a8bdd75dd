"""
License key generation.

Keys are upper-case UUID4 strings, e.g. ``9F1C2B7E-3D4A-4C1B-9E0F-2A6B8C4D1E5F``.
"""

import uuid

MAX_LICENSE_KEY_LENGTH = 100


def generate_license_key() -> str:
    """
    Generate a new license key.

    Returns:
        Generated license key string
    """
    return str(uuid.uuid4()).upper()


def normalize_license_key(raw_key: str) -> str:
    """
    Normalize a key presented by a client.

    Args:
        raw_key: Key as typed or pasted

    Returns:
        Key with surrounding whitespace removed

    Raises:
        ValueError: If the key is empty or too long
    """
    key = (raw_key or "").strip()
    if not key:
        raise ValueError("License key cannot be empty")
    if len(key) > MAX_LICENSE_KEY_LENGTH:
        raise ValueError("License key too long")
    return key
