"""
HealthLock client facade.

Single entry point for consumers: decode a batch of fetched account buffers
and compute the records visible to a viewer.

Example:
    ```python
    from healthlock_client import HealthLock, ViewerRole

    hl = HealthLock()
    batch = hl.decode_batch({
        "UserVault": vault_bytes,
        "HealthRecord:1": record_1_bytes,
        "HealthRecord:2": record_2_bytes,
    })
    views = hl.visible_records(user_key, ViewerRole.USER, batch)
    ```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Union

from .accounts.decoders import decode_account, decode_any
from .accounts.models import AccountRecord, HealthRecord, Organization, UserVault
from .codec.discriminators import DEFAULT_REGISTRY, AccountType, DiscriminatorRegistry
from .codec.reader import Buffer
from .options import DecodeOptions, ReconcileOptions
from .reconcile import (
    RecordStats,
    RecordView,
    record_stats,
    visible_records_for_organization,
    visible_records_for_user,
)
from .runtime.errors import DecodeError, MissingAccountError
from .runtime.identifier import Identifier, IdentifierLike, as_identifier

logger = logging.getLogger(__name__)


class ViewerRole(str, Enum):
    USER = "user"
    ORGANIZATION = "organization"


@dataclass
class BatchResult:
    """Decoded accounts keyed by their input label, plus per-label failures."""
    records: Dict[str, AccountRecord] = field(default_factory=dict)
    failures: Dict[str, DecodeError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    def of_type(self, account_type: Union[str, AccountType]) -> List[AccountRecord]:
        account_type = AccountType.parse(account_type)
        return [r for r in self.records.values() if r.account_type is account_type]

    @property
    def health_records(self) -> List[HealthRecord]:
        return self.of_type(AccountType.HEALTH_RECORD)

    @property
    def user_vaults(self) -> List[UserVault]:
        return self.of_type(AccountType.USER_VAULT)

    @property
    def organizations(self) -> List[Organization]:
        return self.of_type(AccountType.ORGANIZATION)

    def vaults_by_owner(self) -> Dict[Identifier, UserVault]:
        return {vault.owner: vault for vault in self.user_vaults}

    def single(self, account_type: Union[str, AccountType]) -> AccountRecord:
        """
        Return the only decoded account of a type.

        Raises:
            MissingAccountError: if there is none, or more than one
        """
        account_type = AccountType.parse(account_type)
        found = self.of_type(account_type)
        if len(found) != 1:
            raise MissingAccountError(
                f"Expected exactly one {account_type.value} account, found {len(found)}",
                details={"account_type": account_type.value, "count": len(found)},
            )
        return found[0]


class HealthLock:
    """
    Decoding and reconciliation facade.

    Holds the discriminator registry and options; stateless otherwise, so one
    instance can be shared.
    """

    def __init__(
        self,
        registry: DiscriminatorRegistry = DEFAULT_REGISTRY,
        decode_options: Optional[DecodeOptions] = None,
        reconcile_options: Optional[ReconcileOptions] = None,
    ):
        self.registry = registry
        self.decode_options = decode_options or DecodeOptions()
        self.reconcile_options = reconcile_options or ReconcileOptions()

    def decode(self, buffer: Buffer, account_type: Optional[Union[str, AccountType]] = None) -> AccountRecord:
        """Decode one buffer; raises DecodeError on malformed input."""
        if account_type is None:
            return decode_any(buffer, self.registry, self.decode_options)
        return decode_account(buffer, account_type, self.registry, self.decode_options)

    @staticmethod
    def _label_type(label: str) -> Optional[AccountType]:
        # "HealthRecord:7" names the seventh HealthRecord buffer
        try:
            return AccountType.parse(label.split(":", 1)[0])
        except ValueError:
            return None

    def decode_batch(self, buffers: Mapping[str, Buffer]) -> BatchResult:
        """
        Decode a labelled map of account buffers.

        Labels are an account type name, optionally suffixed with ``:<key>``.
        A label that names no known type is decoded by its discriminator.
        Malformed entries are logged and reported in ``failures``; they never
        prevent the other entries from decoding.
        """
        result = BatchResult()
        for label, buffer in buffers.items():
            try:
                result.records[label] = self.decode(buffer, self._label_type(label))
            except DecodeError as e:
                logger.warning(f"Skipping account {label}: {e}")
                result.failures[label] = e
        logger.debug(f"Decoded {len(result.records)} of {len(buffers)} accounts")
        return result

    def visible_records(
        self,
        viewer: IdentifierLike,
        role: Union[str, ViewerRole],
        batch: BatchResult,
        organization: Optional[Organization] = None,
    ) -> List[RecordView]:
        """
        Records visible to ``viewer`` in the decoded batch.

        For ``ViewerRole.USER`` the viewer's vault is taken from the batch.
        For ``ViewerRole.ORGANIZATION`` the viewer is the organization account
        identity written in access lists; ``organization`` defaults to the
        single Organization account in the batch.
        """
        role = ViewerRole(role)
        viewer_id = as_identifier(viewer)
        if role is ViewerRole.USER:
            vault = batch.vaults_by_owner().get(viewer_id)
            return visible_records_for_user(viewer_id, batch.health_records, vault)

        if organization is None:
            try:
                organization = batch.single(AccountType.ORGANIZATION)
            except MissingAccountError as e:
                logger.warning(f"No organization for viewer {viewer_id}: {e}")
                return []
        return visible_records_for_organization(
            viewer_id,
            batch.health_records,
            organization,
            batch.vaults_by_owner(),
            self.reconcile_options,
        )

    def stats(self, views: List[RecordView]) -> RecordStats:
        return record_stats(views)
