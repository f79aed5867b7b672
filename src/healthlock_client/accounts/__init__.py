"""Typed HealthLock accounts with their decoders and encoders."""

from .models import (
    AccessEntry,
    AccountModel,
    AccountRecord,
    GlobalState,
    HealthRecord,
    LotteryPool,
    MODELS_BY_TYPE,
    Organization,
    OrganizationCounter,
    PoolStatus,
    RecordCounter,
    TeeState,
    Ticket,
    UserTicket,
    UserVault,
)
from .decoders import (
    ACCOUNT_DECODERS,
    DecodeResult,
    decode_account,
    decode_any,
    decode_health_record,
    decode_lottery_pool,
    decode_organization,
    decode_tee_state,
    decode_user_ticket,
    decode_user_vault,
    try_decode,
)
from .encoders import ACCOUNT_ENCODERS, encode_account, encode_body

__all__ = [
    "AccessEntry",
    "AccountModel",
    "AccountRecord",
    "GlobalState",
    "HealthRecord",
    "LotteryPool",
    "MODELS_BY_TYPE",
    "Organization",
    "OrganizationCounter",
    "PoolStatus",
    "RecordCounter",
    "TeeState",
    "Ticket",
    "UserTicket",
    "UserVault",
    "ACCOUNT_DECODERS",
    "DecodeResult",
    "decode_account",
    "decode_any",
    "decode_health_record",
    "decode_lottery_pool",
    "decode_organization",
    "decode_tee_state",
    "decode_user_ticket",
    "decode_user_vault",
    "try_decode",
    "ACCOUNT_ENCODERS",
    "encode_account",
    "encode_body",
]
