"""
Cross-account record reconciliation.

Computes the health records a viewer may see from already-decoded
HealthRecord, UserVault and Organization accounts. Activity is always
re-derived from the owner's UserVault: a HealthRecord account can outlive the
vault entry that made it active, and an organization's grant list is never
pruned when a user deactivates a record.

Missing or undecodable vaults exclude only their owner's records; they never
fail the whole call.
"""

from __future__ import annotations

import collections.abc
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

from .accounts.models import HealthRecord, Organization, UserVault
from .options import DEFAULT_RECONCILE_OPTIONS, ReconcileOptions
from .runtime.errors import HealthLockError
from .runtime.identifier import Identifier, IdentifierLike, as_identifier

logger = logging.getLogger(__name__)

VaultLookup = Union[
    Mapping[Any, Optional[UserVault]],
    Callable[[Identifier], Optional[UserVault]],
    Iterable[UserVault],
]


class RecordView(BaseModel):
    """Display projection of a visible HealthRecord."""
    record_id: int = Field(alias="id", ge=0)
    title: str
    description: str
    created_at: int = Field(alias="createdAt")
    access_granted_to: int = Field(alias="accessGrantedTo", ge=0)
    owner: Identifier
    mime_type: str = Field(alias="mimeType")

    model_config = {"populate_by_name": True, "frozen": True}

    @classmethod
    def from_record(cls, record: HealthRecord) -> "RecordView":
        return cls(
            record_id=record.record_id,
            title=record.title,
            description=record.description,
            created_at=record.created_at,
            access_granted_to=record.access_granted_to,
            owner=record.owner,
            mime_type=record.mime_type,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase dictionary the mobile client renders."""
        return self.model_dump(mode="json", by_alias=True)


class RecordStats(BaseModel):
    """Dashboard counters: visible records and total grants across them."""
    record_count: int = Field(default=0, alias="recordCount", ge=0)
    shared_count: int = Field(default=0, alias="sharedCount", ge=0)

    model_config = {"populate_by_name": True, "frozen": True}


def visible_records_for_user(
    user_identity: IdentifierLike,
    all_health_records: Iterable[HealthRecord],
    user_vault: Optional[UserVault],
) -> List[RecordView]:
    """
    Records owned by ``user_identity`` that are still listed in its vault.

    Input order is preserved.
    """
    user = as_identifier(user_identity)
    if user_vault is None:
        logger.debug(f"No vault for user {user}; no records visible")
        return []
    if user_vault.owner != user:
        logger.warning(f"Vault owner {user_vault.owner} does not match viewer {user}; no records visible")
        return []

    active_ids = set(user_vault.record_ids)
    return [
        RecordView.from_record(record)
        for record in all_health_records
        if record.owner == user and record.record_id in active_ids
    ]


def _vault_resolver(vault_lookup: VaultLookup) -> Callable[[Identifier], Optional[UserVault]]:
    if isinstance(vault_lookup, collections.abc.Mapping):
        by_owner = {as_identifier(k): v for k, v in vault_lookup.items()}
        return by_owner.get
    if callable(vault_lookup):
        return vault_lookup
    by_owner = {vault.owner: vault for vault in vault_lookup}
    return by_owner.get


def visible_records_for_organization(
    org_identity: IdentifierLike,
    all_health_records: Iterable[HealthRecord],
    org_account: Optional[Organization],
    vault_lookup: VaultLookup,
    options: Optional[ReconcileOptions] = None,
) -> List[RecordView]:
    """
    Records granted to an organization that are still active.

    Args:
        org_identity: Organization account identity, as written in access lists
        all_health_records: Candidate records, any owner
        org_account: The organization's decoded account
        vault_lookup: Owner -> UserVault as a mapping, a callable returning
            None or raising KeyError when absent, or an iterable of vaults
        options: Reconciliation options

    Returns:
        Visible records in input order
    """
    options = options or DEFAULT_RECONCILE_OPTIONS
    org = as_identifier(org_identity)
    if org_account is None:
        logger.warning(f"No organization account for {org}; no records visible")
        return []

    granted_ids = set(org_account.record_ids)
    resolve = _vault_resolver(vault_lookup)
    vaults: Dict[Identifier, Optional[UserVault]] = {}

    visible: List[RecordView] = []
    for record in all_health_records:
        if record.record_id not in granted_ids:
            continue

        if record.owner not in vaults:
            try:
                vaults[record.owner] = resolve(record.owner)
            except (HealthLockError, LookupError) as e:
                logger.warning(f"Vault for {record.owner} unavailable: {e}")
                vaults[record.owner] = None
        vault = vaults[record.owner]
        if vault is None:
            logger.debug(f"Skipping record {record.record_id}: no vault for owner {record.owner}")
            continue

        if not vault.is_record_active(record.record_id):
            continue
        if options.require_access_entry and not record.has_access(org):
            logger.debug(f"Skipping record {record.record_id}: {org} not in access list")
            continue
        visible.append(RecordView.from_record(record))
    return visible


def record_stats(views: Iterable[RecordView]) -> RecordStats:
    count = 0
    shared = 0
    for view in views:
        count += 1
        shared += view.access_granted_to
    return RecordStats(record_count=count, shared_count=shared)
