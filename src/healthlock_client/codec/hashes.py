"""
Hash Functions

SHA-256 helpers and Anchor discriminator derivation.
"""

import hashlib

DISCRIMINATOR_SIZE = 8


def sha256_bytes(input_bytes: bytes) -> bytes:
    """
    Compute SHA-256 hash of input bytes.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        SHA-256 hash as bytes (32 bytes)
    """
    return hashlib.sha256(input_bytes).digest()


def account_discriminator(struct_name: str) -> bytes:
    """
    Derive the 8-byte account tag for an Anchor account struct.

    Anchor prefixes every account with ``sha256("account:<StructName>")[:8]``.

    Args:
        struct_name: Rust struct name, e.g. ``"HealthRecord"``

    Returns:
        8-byte discriminator
    """
    return sha256_bytes(f"account:{struct_name}".encode("utf-8"))[:DISCRIMINATOR_SIZE]
