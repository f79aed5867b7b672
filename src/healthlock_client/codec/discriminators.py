"""
Account discriminator registry.

Maps each logical account type to the 8-byte tag Anchor writes at the start
of the account, and validates a buffer's tag before any field is read.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Union

from ..runtime.errors import DiscriminatorMismatchError, OutOfBoundsError, UnknownAccountTypeError
from .hashes import DISCRIMINATOR_SIZE, account_discriminator


class AccountType(str, Enum):
    """Logical account types. Values are the on-chain struct names."""

    ORGANIZATION = "Organization"
    USER_VAULT = "UserVault"
    HEALTH_RECORD = "HealthRecord"
    TEE_STATE = "TEEState"
    LOTTERY_POOL = "LotteryPool"
    USER_TICKET = "UserTicket"
    GLOBAL_STATE = "GlobalState"
    RECORD_COUNTER = "RecordCounter"
    ORGANIZATION_COUNTER = "OrganizationCounter"

    @classmethod
    def parse(cls, value: Union[str, "AccountType"]) -> "AccountType":
        """Accept an AccountType, its value, or its member name."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Unknown account type: {value!r}")
        try:
            return cls(value)
        except ValueError:
            pass
        # "TeeState", "tee_state" and "TEE_STATE" all name the same account
        wanted = value.replace("_", "").lower()
        for member in cls:
            if wanted in (member.value.lower(), member.name.replace("_", "").lower()):
                return member
        raise ValueError(f"Unknown account type: {value}")


class DiscriminatorRegistry:
    """
    Read-only table of account type -> 8-byte tag.

    Tags are derived once at construction and compared by value.
    """

    def __init__(self, account_types: Optional[Iterable[AccountType]] = None):
        types_ = list(account_types) if account_types is not None else list(AccountType)
        tags: Dict[AccountType, bytes] = {t: account_discriminator(t.value) for t in types_}
        self._tags: Mapping[AccountType, bytes] = MappingProxyType(tags)
        self._by_tag: Mapping[bytes, AccountType] = MappingProxyType({v: k for k, v in tags.items()})

    @property
    def tags(self) -> Mapping[AccountType, bytes]:
        return self._tags

    def __contains__(self, account_type: object) -> bool:
        return account_type in self._tags

    def tag(self, account_type: Union[str, AccountType]) -> bytes:
        """Return the 8-byte tag for an account type."""
        account_type = AccountType.parse(account_type)
        try:
            return self._tags[account_type]
        except KeyError:
            raise ValueError(f"Account type not registered: {account_type.value}") from None

    @staticmethod
    def _leading(buffer: bytes) -> bytes:
        if len(buffer) < DISCRIMINATOR_SIZE:
            raise OutOfBoundsError("discriminator", 0, DISCRIMINATOR_SIZE, len(buffer))
        return bytes(buffer[:DISCRIMINATOR_SIZE])

    def identify(self, buffer: bytes) -> AccountType:
        """
        Return the account type whose tag matches the buffer's first 8 bytes.

        Raises:
            UnknownAccountTypeError: if no registered tag matches
            OutOfBoundsError: if the buffer is shorter than a tag
        """
        leading = self._leading(buffer)
        account_type = self._by_tag.get(leading)
        if account_type is None:
            raise UnknownAccountTypeError(leading)
        return account_type

    def expect(self, buffer: bytes, account_type: Union[str, AccountType]) -> AccountType:
        """
        Check that the buffer carries the tag of ``account_type``.

        Raises:
            DiscriminatorMismatchError: if the tag differs
            OutOfBoundsError: if the buffer is shorter than a tag
        """
        account_type = AccountType.parse(account_type)
        expected = self.tag(account_type)
        leading = self._leading(buffer)
        if leading != expected:
            raise DiscriminatorMismatchError(account_type.value, leading)
        return account_type


DEFAULT_REGISTRY = DiscriminatorRegistry()


def identify(buffer: bytes) -> AccountType:
    return DEFAULT_REGISTRY.identify(buffer)


def expect(buffer: bytes, account_type: Union[str, AccountType]) -> AccountType:
    return DEFAULT_REGISTRY.expect(buffer, account_type)
