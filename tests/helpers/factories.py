"""
Test factories for creating account records consistently.

Provides deterministic identifiers and builders for the HealthLock account
shapes with sensible defaults that individual tests override.
"""

from __future__ import annotations
import hashlib
from typing import Any, Iterable, Optional, Union

from healthlock_client.accounts.models import AccessEntry, HealthRecord, Organization, UserVault
from healthlock_client.runtime.identifier import Identifier


def mk_identifier(seed: Union[int, str, bytes] = 0) -> Identifier:
    """
    Create a deterministic 32-byte identifier.

    Args:
        seed: Any int, str or bytes; equal seeds give equal identifiers

    Returns:
        Identifier derived from sha256 of the seed
    """
    if isinstance(seed, int):
        seed_bytes = seed.to_bytes(8, "big", signed=True)
    elif isinstance(seed, str):
        seed_bytes = seed.encode("utf-8")
    else:
        seed_bytes = seed
    return Identifier(hashlib.sha256(b"healthlock-test:" + seed_bytes).digest())


def mk_access_entry(organization: Union[Identifier, str], granted_at: int = 1753008900) -> AccessEntry:
    if not isinstance(organization, Identifier):
        organization = mk_identifier(organization)
    return AccessEntry(organization=organization, granted_at=granted_at)


def mk_health_record(
    owner: Identifier,
    record_id: int,
    access_to: Iterable[Union[Identifier, str]] = (),
    **overrides: Any,
) -> HealthRecord:
    values = dict(
        owner=owner,
        record_id=record_id,
        encrypted_data=f"bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzd{record_id}".encode(),
        created_at=1753008850 + record_id,
        access_list=[mk_access_entry(org) for org in access_to],
        mime_type="application/pdf",
        file_size=20480 + record_id,
        description="CBP report Vijaya Diagnostics",
        title=f"CBP Report {record_id}",
    )
    values.update(overrides)
    return HealthRecord(**values)


def mk_user_vault(owner: Identifier, record_ids: Iterable[int] = (), **overrides: Any) -> UserVault:
    values = dict(
        owner=owner,
        record_ids=list(record_ids),
        created_at=1753000000,
        name="Asha",
        age=34,
        is_active=True,
    )
    values.update(overrides)
    return UserVault(**values)


def mk_organization(
    owner: Identifier,
    record_ids: Iterable[int] = (),
    organization_id: int = 1,
    **overrides: Any,
) -> Organization:
    values = dict(
        owner=owner,
        organization_id=organization_id,
        name="Vijaya Diagnostics",
        contact_info="contact@vijaya.example",
        created_at=1752000000,
        description="Diagnostic laboratory",
        record_ids=list(record_ids),
    )
    values.update(overrides)
    return Organization(**values)
