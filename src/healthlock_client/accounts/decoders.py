"""
Account decoders.

One decoder per account shape. Each is a fixed left-to-right sequence of
field reads matching the on-chain layout; there is no random access into a
record. The discriminator is always validated before the body is read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from ..codec.discriminators import DEFAULT_REGISTRY, AccountType, DiscriminatorRegistry
from ..codec.hashes import DISCRIMINATOR_SIZE
from ..codec.reader import Buffer, FieldReader
from ..options import DEFAULT_DECODE_OPTIONS, DecodeOptions
from ..runtime.errors import DecodeError, InvalidValueError
from .models import (
    AccessEntry,
    AccountRecord,
    GlobalState,
    HealthRecord,
    LotteryPool,
    Organization,
    OrganizationCounter,
    PoolStatus,
    RecordCounter,
    TeeState,
    Ticket,
    UserTicket,
    UserVault,
)

logger = logging.getLogger(__name__)

AccountDecoder = Callable[[FieldReader, DecodeOptions], AccountRecord]


def _build(model_cls, reader: FieldReader, **values):
    """Construct a record, reporting domain violations as InvalidValueError."""
    try:
        return model_cls(**values)
    except ValidationError as e:
        first = e.errors()[0]
        loc = first.get("loc") or ()
        field = str(loc[0]) if loc else None
        offset = reader.field_offset(field) if field else None
        if offset is None:
            offset = reader.offset
        raise InvalidValueError(field, offset, first.get("input"), cause=e) from e


# =============================================================================
# Embedded elements
# =============================================================================

def read_access_entry(reader: FieldReader) -> AccessEntry:
    return _build(
        AccessEntry,
        reader,
        organization=reader.read_identifier("access_list.organization"),
        granted_at=reader.read_i64_le("access_list.granted_at"),
    )


def read_ticket(reader: FieldReader) -> Ticket:
    return _build(
        Ticket,
        reader,
        ticket_number=reader.read_u64_le("tickets.ticket_number"),
        amount_paid=reader.read_u64_le("tickets.amount_paid"),
        timestamp=reader.read_i64_le("tickets.timestamp"),
    )


def _read_u64(reader: FieldReader) -> int:
    return reader.read_u64_le()


def _read_identifier(reader: FieldReader):
    return reader.read_identifier()


def read_access_list(reader: FieldReader, options: DecodeOptions = DEFAULT_DECODE_OPTIONS) -> List[AccessEntry]:
    """
    Read the access-list vector of a HealthRecord.

    If the declared count cannot fit in the rest of the buffer the list is
    taken as empty and only the 4-byte count is consumed, so the independently
    length-prefixed fields after it are still decoded.
    """
    if not options.degrade_access_list:
        return reader.read_vector(read_access_entry, "access_list", AccessEntry.WIRE_SIZE)

    start = reader.offset
    count = reader.read_u32_le("access_list")
    if count * AccessEntry.WIRE_SIZE > reader.remaining:
        logger.warning(
            f"Skipping corrupt access list at offset {start}: {count} entries declared, "
            f"{reader.remaining} bytes remain"
        )
        return []
    return [read_access_entry(reader) for _ in range(count)]


# =============================================================================
# Account bodies
# =============================================================================

def decode_organization_body(reader: FieldReader, options: DecodeOptions = DEFAULT_DECODE_OPTIONS) -> Organization:
    return _build(
        Organization,
        reader,
        owner=reader.read_identifier("owner"),
        organization_id=reader.read_u64_le("organization_id"),
        name=reader.read_string("name"),
        contact_info=reader.read_string("contact_info"),
        created_at=reader.read_i64_le("created_at"),
        description=reader.read_string("description"),
        record_ids=reader.read_vector(_read_u64, "record_ids", 8),
    )


def decode_user_vault_body(reader: FieldReader, options: DecodeOptions = DEFAULT_DECODE_OPTIONS) -> UserVault:
    return _build(
        UserVault,
        reader,
        owner=reader.read_identifier("owner"),
        record_ids=reader.read_vector(_read_u64, "record_ids", 8),
        created_at=reader.read_i64_le("created_at"),
        name=reader.read_string("name"),
        age=reader.read_u64_le("age"),
        is_active=reader.read_bool("is_active"),
    )


def decode_health_record_body(reader: FieldReader, options: DecodeOptions = DEFAULT_DECODE_OPTIONS) -> HealthRecord:
    return _build(
        HealthRecord,
        reader,
        owner=reader.read_identifier("owner"),
        record_id=reader.read_u64_le("record_id"),
        encrypted_data=reader.read_length_prefixed_bytes("encrypted_data"),
        created_at=reader.read_i64_le("created_at"),
        access_list=read_access_list(reader, options),
        mime_type=reader.read_string("mime_type"),
        file_size=reader.read_u64_le("file_size"),
        description=reader.read_string("description"),
        title=reader.read_string("title"),
    )


def decode_tee_state_body(reader: FieldReader, options: DecodeOptions = DEFAULT_DECODE_OPTIONS) -> TeeState:
    return _build(
        TeeState,
        reader,
        signer=reader.read_identifier("signer"),
        pubkey=reader.read_length_prefixed_bytes("pubkey"),
        attestation=reader.read_length_prefixed_bytes("attestation"),
        is_initialized=reader.read_bool("is_initialized"),
    )


def decode_record_counter_body(reader: FieldReader, options: DecodeOptions = DEFAULT_DECODE_OPTIONS) -> RecordCounter:
    return _build(RecordCounter, reader, record_id=reader.read_u64_le("record_id"))


def decode_organization_counter_body(
    reader: FieldReader, options: DecodeOptions = DEFAULT_DECODE_OPTIONS
) -> OrganizationCounter:
    return _build(OrganizationCounter, reader, organization_id=reader.read_u64_le("organization_id"))


def _read_pool_status(reader: FieldReader) -> PoolStatus:
    start = reader.offset
    raw = reader.read_u8("status")
    try:
        return PoolStatus(raw)
    except ValueError as e:
        raise InvalidValueError("status", start, raw, cause=e) from e


def decode_lottery_pool_body(reader: FieldReader, options: DecodeOptions = DEFAULT_DECODE_OPTIONS) -> LotteryPool:
    return _build(
        LotteryPool,
        reader,
        pool_id=reader.read_u64_le("pool_id"),
        status=_read_pool_status(reader),
        prize_pool=reader.read_u64_le("prize_pool"),
        participants=reader.read_vector(_read_identifier, "participants", 32),
        tickets_sold=reader.read_u64_le("tickets_sold"),
        draw_interval=reader.read_i64_le("draw_interval"),
        draw_time=reader.read_i64_le("draw_time"),
        created_at=reader.read_i64_le("created_at"),
        bump=reader.read_u8("bump"),
    )


def decode_user_ticket_body(reader: FieldReader, options: DecodeOptions = DEFAULT_DECODE_OPTIONS) -> UserTicket:
    return _build(
        UserTicket,
        reader,
        user=reader.read_identifier("user"),
        pool=reader.read_identifier("pool"),
        pool_id=reader.read_u64_le("pool_id"),
        tickets=reader.read_vector(read_ticket, "tickets", Ticket.WIRE_SIZE),
        bump=reader.read_u8("bump"),
    )


def decode_global_state_body(reader: FieldReader, options: DecodeOptions = DEFAULT_DECODE_OPTIONS) -> GlobalState:
    return _build(
        GlobalState,
        reader,
        authority=reader.read_identifier("authority"),
        platform_wallet=reader.read_identifier("platform_wallet"),
        usdc_mint=reader.read_identifier("usdc_mint"),
        platform_fee_bps=reader.read_u16_le("platform_fee_bps"),
        pools_count=reader.read_u64_le("pools_count"),
        creators_whitelist=reader.read_vector(_read_identifier, "creators_whitelist", 32),
        bump=reader.read_u8("bump"),
    )


# Account type -> body decoder
ACCOUNT_DECODERS: Dict[AccountType, AccountDecoder] = {
    AccountType.ORGANIZATION: decode_organization_body,
    AccountType.USER_VAULT: decode_user_vault_body,
    AccountType.HEALTH_RECORD: decode_health_record_body,
    AccountType.TEE_STATE: decode_tee_state_body,
    AccountType.RECORD_COUNTER: decode_record_counter_body,
    AccountType.ORGANIZATION_COUNTER: decode_organization_counter_body,
    AccountType.LOTTERY_POOL: decode_lottery_pool_body,
    AccountType.USER_TICKET: decode_user_ticket_body,
    AccountType.GLOBAL_STATE: decode_global_state_body,
}


# =============================================================================
# Entry points
# =============================================================================

def decode_account(
    buffer: Buffer,
    account_type: Union[str, AccountType],
    registry: DiscriminatorRegistry = DEFAULT_REGISTRY,
    options: Optional[DecodeOptions] = None,
) -> AccountRecord:
    """
    Decode a buffer as ``account_type``.

    The discriminator is checked first, even when the caller already knows
    the type from how the buffer was fetched.

    Raises:
        DecodeError: tagged with account type, offset and field name
    """
    options = options or DEFAULT_DECODE_OPTIONS
    try:
        account_type = AccountType.parse(account_type)
    except ValueError as e:
        raise DecodeError(str(e), field="discriminator", offset=0, cause=e) from e
    if account_type not in registry:
        raise DecodeError(
            f"Account type not registered: {account_type.value}",
            account_type=account_type.value,
            offset=0,
            field="discriminator",
        )
    try:
        registry.expect(buffer, account_type)
        reader = FieldReader(buffer, DISCRIMINATOR_SIZE)
        return ACCOUNT_DECODERS[account_type](reader, options)
    except DecodeError as e:
        raise e.with_account_type(account_type.value)


def decode_any(
    buffer: Buffer,
    registry: DiscriminatorRegistry = DEFAULT_REGISTRY,
    options: Optional[DecodeOptions] = None,
) -> AccountRecord:
    """Identify the account type from its discriminator, then decode it."""
    account_type = registry.identify(buffer)
    return decode_account(buffer, account_type, registry, options)


def decode_health_record(buffer: Buffer, options: Optional[DecodeOptions] = None) -> HealthRecord:
    return decode_account(buffer, AccountType.HEALTH_RECORD, options=options)


def decode_user_vault(buffer: Buffer, options: Optional[DecodeOptions] = None) -> UserVault:
    return decode_account(buffer, AccountType.USER_VAULT, options=options)


def decode_organization(buffer: Buffer, options: Optional[DecodeOptions] = None) -> Organization:
    return decode_account(buffer, AccountType.ORGANIZATION, options=options)


def decode_tee_state(buffer: Buffer, options: Optional[DecodeOptions] = None) -> TeeState:
    return decode_account(buffer, AccountType.TEE_STATE, options=options)


def decode_lottery_pool(buffer: Buffer, options: Optional[DecodeOptions] = None) -> LotteryPool:
    return decode_account(buffer, AccountType.LOTTERY_POOL, options=options)


def decode_user_ticket(buffer: Buffer, options: Optional[DecodeOptions] = None) -> UserTicket:
    return decode_account(buffer, AccountType.USER_TICKET, options=options)


@dataclass
class DecodeResult:
    """Outcome of decoding one buffer: a record or a typed error, never both."""
    record: Optional[AccountRecord] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> AccountRecord:
        if self.error is not None:
            raise self.error
        return self.record


def try_decode(
    buffer: Buffer,
    account_type: Optional[Union[str, AccountType]] = None,
    registry: DiscriminatorRegistry = DEFAULT_REGISTRY,
    options: Optional[DecodeOptions] = None,
) -> DecodeResult:
    """
    Decode without raising for malformed input.

    With no ``account_type`` the type is identified from the discriminator.
    """
    try:
        if account_type is None:
            record = decode_any(buffer, registry, options)
        else:
            record = decode_account(buffer, account_type, registry, options)
    except DecodeError as e:
        return DecodeResult(error=e)
    return DecodeResult(record=record)
