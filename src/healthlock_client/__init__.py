"""
HealthLock Python Client

Defensive decoding of HealthLock on-chain accounts and reconciliation of the
health records visible to a user or an organization.
"""

from .runtime import errors as _errors
from .runtime.errors import *
from .runtime.identifier import Identifier, as_identifier
from .codec import AccountType, AccountWriter, Cursor, DiscriminatorRegistry, DEFAULT_REGISTRY, FieldReader
from . import accounts as _accounts
from .accounts import *
from .options import DecodeOptions, ReconcileOptions
from .reconcile import (
    RecordStats,
    RecordView,
    record_stats,
    visible_records_for_organization,
    visible_records_for_user,
)
from .lottery import TicketSummary, pool_has_participant, summarize_tickets, tickets_for_user
from .facade import BatchResult, HealthLock, ViewerRole

__version__ = "0.3.0"
__all__ = [
    # Facade
    "HealthLock",
    "BatchResult",
    "ViewerRole",

    # Codec
    "AccountType",
    "AccountWriter",
    "Cursor",
    "FieldReader",
    "DiscriminatorRegistry",
    "DEFAULT_REGISTRY",
    "Identifier",
    "as_identifier",

    # Options
    "DecodeOptions",
    "ReconcileOptions",

    # Reconciliation
    "RecordView",
    "RecordStats",
    "record_stats",
    "visible_records_for_user",
    "visible_records_for_organization",

    # Lottery
    "TicketSummary",
    "tickets_for_user",
    "summarize_tickets",
    "pool_has_participant",
]
__all__ += _errors.__all__ + _accounts.__all__
