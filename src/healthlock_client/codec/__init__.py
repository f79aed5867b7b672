"""
HealthLock Binary Codec Module

Defensive decoding of Anchor account buffers: an 8-byte discriminator
followed by positional little-endian fields.

Key components:
- reader.py: Bounds-checked cursor and typed field decoders
- writer.py: Account writer, the inverse of the reader
- discriminators.py: Account type registry and tag validation
- hashes.py: SHA-256 helpers and discriminator derivation
"""

from .hashes import DISCRIMINATOR_SIZE, account_discriminator, sha256_bytes
from .reader import Cursor, FieldReader
from .writer import AccountWriter
from .discriminators import AccountType, DiscriminatorRegistry, DEFAULT_REGISTRY, expect, identify

__all__ = [
    "DISCRIMINATOR_SIZE",
    "account_discriminator",
    "sha256_bytes",
    "Cursor",
    "FieldReader",
    "AccountWriter",
    "AccountType",
    "DiscriminatorRegistry",
    "DEFAULT_REGISTRY",
    "expect",
    "identify",
]
