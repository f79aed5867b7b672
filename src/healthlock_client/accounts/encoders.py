"""
Account encoders.

Byte-exact inverses of the decoders, used to build fixture buffers and to
check decoders against known-good encodings.
"""

from __future__ import annotations

from typing import Callable, Dict

from ..codec.discriminators import DEFAULT_REGISTRY, AccountType, DiscriminatorRegistry
from ..codec.writer import AccountWriter
from .models import (
    AccessEntry,
    AccountRecord,
    GlobalState,
    HealthRecord,
    LotteryPool,
    Organization,
    OrganizationCounter,
    RecordCounter,
    TeeState,
    Ticket,
    UserTicket,
    UserVault,
)


def write_access_entry(w: AccountWriter, entry: AccessEntry) -> None:
    w.identifier(entry.organization)
    w.i64le(entry.granted_at)


def write_ticket(w: AccountWriter, ticket: Ticket) -> None:
    w.u64le(ticket.ticket_number)
    w.u64le(ticket.amount_paid)
    w.i64le(ticket.timestamp)


def _encode_organization(w: AccountWriter, r: Organization) -> None:
    w.identifier(r.owner)
    w.u64le(r.organization_id)
    w.string(r.name)
    w.string(r.contact_info)
    w.i64le(r.created_at)
    w.string(r.description)
    w.vector(r.record_ids, AccountWriter.u64le)


def _encode_user_vault(w: AccountWriter, r: UserVault) -> None:
    w.identifier(r.owner)
    w.vector(r.record_ids, AccountWriter.u64le)
    w.i64le(r.created_at)
    w.string(r.name)
    w.u64le(r.age)
    w.bool(r.is_active)


def _encode_health_record(w: AccountWriter, r: HealthRecord) -> None:
    w.identifier(r.owner)
    w.u64le(r.record_id)
    w.len_prefixed_bytes(r.encrypted_data)
    w.i64le(r.created_at)
    w.vector(r.access_list, write_access_entry)
    w.string(r.mime_type)
    w.u64le(r.file_size)
    w.string(r.description)
    w.string(r.title)


def _encode_tee_state(w: AccountWriter, r: TeeState) -> None:
    w.identifier(r.signer)
    w.len_prefixed_bytes(r.pubkey)
    w.len_prefixed_bytes(r.attestation)
    w.bool(r.is_initialized)


def _encode_record_counter(w: AccountWriter, r: RecordCounter) -> None:
    w.u64le(r.record_id)


def _encode_organization_counter(w: AccountWriter, r: OrganizationCounter) -> None:
    w.u64le(r.organization_id)


def _encode_lottery_pool(w: AccountWriter, r: LotteryPool) -> None:
    w.u64le(r.pool_id)
    w.u8(int(r.status))
    w.u64le(r.prize_pool)
    w.vector(r.participants, AccountWriter.identifier)
    w.u64le(r.tickets_sold)
    w.i64le(r.draw_interval)
    w.i64le(r.draw_time)
    w.i64le(r.created_at)
    w.u8(r.bump)


def _encode_user_ticket(w: AccountWriter, r: UserTicket) -> None:
    w.identifier(r.user)
    w.identifier(r.pool)
    w.u64le(r.pool_id)
    w.vector(r.tickets, write_ticket)
    w.u8(r.bump)


def _encode_global_state(w: AccountWriter, r: GlobalState) -> None:
    w.identifier(r.authority)
    w.identifier(r.platform_wallet)
    w.identifier(r.usdc_mint)
    w.u16le(r.platform_fee_bps)
    w.u64le(r.pools_count)
    w.vector(r.creators_whitelist, AccountWriter.identifier)
    w.u8(r.bump)


ACCOUNT_ENCODERS: Dict[AccountType, Callable[[AccountWriter, AccountRecord], None]] = {
    AccountType.ORGANIZATION: _encode_organization,
    AccountType.USER_VAULT: _encode_user_vault,
    AccountType.HEALTH_RECORD: _encode_health_record,
    AccountType.TEE_STATE: _encode_tee_state,
    AccountType.RECORD_COUNTER: _encode_record_counter,
    AccountType.ORGANIZATION_COUNTER: _encode_organization_counter,
    AccountType.LOTTERY_POOL: _encode_lottery_pool,
    AccountType.USER_TICKET: _encode_user_ticket,
    AccountType.GLOBAL_STATE: _encode_global_state,
}


def encode_body(record: AccountRecord) -> bytes:
    """Encode the fields of a record without its discriminator."""
    w = AccountWriter()
    ACCOUNT_ENCODERS[record.account_type](w, record)
    return w.to_bytes()


def encode_account(record: AccountRecord, registry: DiscriminatorRegistry = DEFAULT_REGISTRY) -> bytes:
    """Encode a record as a full account buffer: discriminator then fields."""
    return registry.tag(record.account_type) + encode_body(record)
