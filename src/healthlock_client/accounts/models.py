"""
Typed account records.

One pydantic model per on-chain account shape. Field order in each model is
the wire order; the decoders and encoders in this package walk the fields in
exactly this sequence.
"""

from __future__ import annotations

import base64
from enum import IntEnum
from typing import Annotated, Any, ClassVar, Dict, List, Union

from pydantic import BaseModel, Field, field_validator

from ..codec.discriminators import AccountType
from ..runtime.identifier import IDENTIFIER_SIZE, Identifier

U8 = Annotated[int, Field(ge=0, le=0xFF)]
U16 = Annotated[int, Field(ge=0, le=0xFFFF)]
U64 = Annotated[int, Field(ge=0, le=0xFFFFFFFFFFFFFFFF)]
I64 = Annotated[int, Field(ge=-(2 ** 63), le=2 ** 63 - 1)]


class AccountModel(BaseModel):
    """Base for decoded accounts: immutable snapshots of on-chain state."""

    account_type: ClassVar[AccountType]

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "ser_json_bytes": "base64",
    }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")


# =============================================================================
# HealthLock program accounts
# =============================================================================

class AccessEntry(BaseModel):
    """Grant of one record to one organization. Embedded in HealthRecord."""

    WIRE_SIZE: ClassVar[int] = IDENTIFIER_SIZE + 8

    organization: Identifier
    granted_at: I64

    model_config = {"frozen": True}


class Organization(AccountModel):
    """
    Registered organization, one per owning identity.

    ``record_ids`` lists the records the organization has been granted. It is
    append-only and is not pruned when a user deactivates a record.
    """

    account_type: ClassVar[AccountType] = AccountType.ORGANIZATION

    owner: Identifier
    organization_id: U64
    name: str
    contact_info: str
    created_at: I64
    description: str
    record_ids: List[U64] = Field(default_factory=list)

    def grants(self, record_id: int) -> bool:
        return record_id in self.record_ids


class UserVault(AccountModel):
    """
    Per-user vault. ``record_ids`` is the authoritative set of active records.
    """

    account_type: ClassVar[AccountType] = AccountType.USER_VAULT

    owner: Identifier
    record_ids: List[U64] = Field(default_factory=list)
    created_at: I64
    name: str
    age: U64
    is_active: bool

    def is_record_active(self, record_id: int) -> bool:
        return record_id in self.record_ids


class HealthRecord(AccountModel):
    """
    Encrypted health record metadata.

    ``encrypted_data`` is a content-addressed pointer to the encrypted file,
    not the health data itself. A HealthRecord can exist on-chain while being
    inactive; activity lives in the owner's UserVault.
    """

    account_type: ClassVar[AccountType] = AccountType.HEALTH_RECORD

    owner: Identifier
    record_id: U64
    encrypted_data: bytes
    created_at: I64
    access_list: List[AccessEntry] = Field(default_factory=list)
    mime_type: str
    file_size: U64
    description: str
    title: str

    @field_validator("access_list")
    @classmethod
    def _one_entry_per_organization(cls, v: List[AccessEntry]) -> List[AccessEntry]:
        seen = set()
        for entry in v:
            if entry.organization in seen:
                raise ValueError(f"duplicate access entry for organization {entry.organization}")
            seen.add(entry.organization)
        return v

    @property
    def access_granted_to(self) -> int:
        return len(self.access_list)

    def has_access(self, organization: Identifier) -> bool:
        return any(entry.organization == organization for entry in self.access_list)

    @property
    def content_id(self) -> str:
        """The encrypted payload pointer as text (an IPFS CID upstream)."""
        return self.encrypted_data.decode("utf-8", errors="replace")


class TeeState(AccountModel):
    """Trusted-execution node registration, one per signer."""

    account_type: ClassVar[AccountType] = AccountType.TEE_STATE

    signer: Identifier
    pubkey: bytes
    attestation: bytes
    is_initialized: bool

    @property
    def pubkey_b64(self) -> str:
        return base64.b64encode(self.pubkey).decode("ascii")

    @property
    def attestation_hex(self) -> str:
        return self.attestation.hex()


class RecordCounter(AccountModel):
    """Global monotonic counter; ``record_id`` is the next ID to assign."""

    account_type: ClassVar[AccountType] = AccountType.RECORD_COUNTER

    record_id: U64


class OrganizationCounter(AccountModel):
    account_type: ClassVar[AccountType] = AccountType.ORGANIZATION_COUNTER

    organization_id: U64


# =============================================================================
# Lottery program accounts
# =============================================================================

class PoolStatus(IntEnum):
    ACTIVE = 0
    DRAWING = 1
    COMPLETED = 2
    CANCELLED = 3


class LotteryPool(AccountModel):
    account_type: ClassVar[AccountType] = AccountType.LOTTERY_POOL

    pool_id: U64
    status: PoolStatus
    prize_pool: U64
    participants: List[Identifier] = Field(default_factory=list)
    tickets_sold: U64
    draw_interval: I64
    draw_time: I64
    created_at: I64
    bump: U8


class Ticket(BaseModel):
    """One purchased ticket. Embedded in UserTicket."""

    WIRE_SIZE: ClassVar[int] = 24

    ticket_number: U64
    amount_paid: U64
    timestamp: I64

    model_config = {"frozen": True}


class UserTicket(AccountModel):
    """A participant's tickets in one pool."""

    account_type: ClassVar[AccountType] = AccountType.USER_TICKET

    user: Identifier
    pool: Identifier
    pool_id: U64
    tickets: List[Ticket] = Field(default_factory=list)
    bump: U8


class GlobalState(AccountModel):
    account_type: ClassVar[AccountType] = AccountType.GLOBAL_STATE

    authority: Identifier
    platform_wallet: Identifier
    usdc_mint: Identifier
    platform_fee_bps: U16
    pools_count: U64
    creators_whitelist: List[Identifier] = Field(default_factory=list)
    bump: U8


AccountRecord = Union[
    Organization,
    UserVault,
    HealthRecord,
    TeeState,
    RecordCounter,
    OrganizationCounter,
    LotteryPool,
    UserTicket,
    GlobalState,
]

MODELS_BY_TYPE: Dict[AccountType, type] = {
    model.account_type: model
    for model in (
        Organization,
        UserVault,
        HealthRecord,
        TeeState,
        RecordCounter,
        OrganizationCounter,
        LotteryPool,
        UserTicket,
        GlobalState,
    )
}
