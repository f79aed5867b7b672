"""
Identifier Pydantic custom type for 32-byte public keys.
"""

from typing import Any, Union

import base58
from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

IDENTIFIER_SIZE = 32


class Identifier:
    """Custom Pydantic type for 32-byte account identities (owner, organization, signer)."""

    __slots__ = ("_raw",)

    def __init__(self, raw: Union[bytes, bytearray, memoryview]):
        if not isinstance(raw, (bytes, bytearray, memoryview)):
            raise ValueError("Identifier must be built from bytes")
        raw = bytes(raw)
        if len(raw) != IDENTIFIER_SIZE:
            raise ValueError(f"Identifier must be {IDENTIFIER_SIZE} bytes, got {len(raw)}")
        self._raw = raw

    @classmethod
    def from_base58(cls, value: str) -> "Identifier":
        try:
            raw = base58.b58decode(value)
        except ValueError as e:
            raise ValueError(f"Invalid base-58 identifier: {value}") from e
        return cls(raw)

    @classmethod
    def from_hex(cls, value: str) -> "Identifier":
        return cls(bytes.fromhex(value))

    @classmethod
    def parse(cls, value: str) -> "Identifier":
        """Parse a base-58 or 64-character hex string."""
        if len(value) == IDENTIFIER_SIZE * 2:
            try:
                return cls.from_hex(value)
            except ValueError:
                pass
        return cls.from_base58(value)

    def to_bytes(self) -> bytes:
        return self._raw

    def to_base58(self) -> str:
        return base58.b58encode(self._raw).decode("ascii")

    def hex(self) -> str:
        return self._raw.hex()

    def __bytes__(self) -> bytes:
        return self._raw

    def __str__(self) -> str:
        return self.to_base58()

    def __repr__(self) -> str:
        return f"Identifier('{self.to_base58()}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Identifier):
            return self._raw == other._raw
        if isinstance(other, (bytes, bytearray)):
            return self._raw == bytes(other)
        # text is not comparable; parse it with as_identifier first
        return False

    def __hash__(self) -> int:
        return hash(self._raw)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Return a Pydantic CoreSchema that validates the Identifier."""
        return core_schema.no_info_before_validator_function(
            cls._validate,
            core_schema.is_instance_schema(cls),
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="json"
            ),
        )

    @classmethod
    def _validate(cls, value: Any, _info=None) -> "Identifier":
        """Validate and convert the input to an Identifier."""
        if isinstance(value, cls):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(value)
        if isinstance(value, str):
            return cls.parse(value)
        raise ValueError(f"Invalid Identifier: {value!r}")


IdentifierLike = Union[Identifier, bytes, str]


def as_identifier(value: IdentifierLike) -> Identifier:
    """Coerce bytes, base-58 or hex text into an Identifier."""
    return Identifier._validate(value)
