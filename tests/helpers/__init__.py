"""Test helpers for the HealthLock client test suite."""

from .factories import (
    mk_access_entry,
    mk_health_record,
    mk_identifier,
    mk_organization,
    mk_user_vault,
)

__all__ = [
    "mk_access_entry",
    "mk_health_record",
    "mk_identifier",
    "mk_organization",
    "mk_user_vault",
]
