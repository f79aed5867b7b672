"""
Reconciliation engine tests.

Visibility for a user is re-derived from the user's vault; visibility for an
organization requires a grant, an active record in the owner's vault and, by
default, an access-list entry for the organization.
"""

import pytest

from healthlock_client.options import ReconcileOptions
from healthlock_client.reconcile import (
    RecordStats,
    RecordView,
    record_stats,
    visible_records_for_organization,
    visible_records_for_user,
)
from healthlock_client.runtime.errors import MissingAccountError

from helpers.factories import mk_health_record, mk_identifier, mk_organization, mk_user_vault


def ids(views):
    return [v.record_id for v in views]


class TestVisibleRecordsForUser:
    """User-scoped visibility"""

    def test_vault_1_3_of_records_1_2_3(self, user_a):
        records = [mk_health_record(user_a, i) for i in (1, 2, 3)]
        vault = mk_user_vault(user_a, record_ids=[1, 3])
        assert ids(visible_records_for_user(user_a, records, vault)) == [1, 3]

    def test_removed_record_excluded_while_account_exists(self, user_a):
        records = [mk_health_record(user_a, 1), mk_health_record(user_a, 2)]
        before = mk_user_vault(user_a, record_ids=[1, 2])
        after = mk_user_vault(user_a, record_ids=[1])
        assert ids(visible_records_for_user(user_a, records, before)) == [1, 2]
        assert ids(visible_records_for_user(user_a, records, after)) == [1]

    def test_other_owners_excluded(self, user_a, user_b):
        records = [mk_health_record(user_a, 1), mk_health_record(user_b, 2)]
        vault = mk_user_vault(user_a, record_ids=[1, 2])
        assert ids(visible_records_for_user(user_a, records, vault)) == [1]

    def test_input_order_preserved(self, user_a):
        records = [mk_health_record(user_a, i) for i in (9, 4, 7)]
        vault = mk_user_vault(user_a, record_ids=[4, 7, 9])
        assert ids(visible_records_for_user(user_a, records, vault)) == [9, 4, 7]

    def test_access_granted_to_annotation(self, user_a):
        records = [mk_health_record(user_a, 1, access_to=["o1", "o2", "o3"])]
        vault = mk_user_vault(user_a, record_ids=[1])
        [view] = visible_records_for_user(user_a, records, vault)
        assert view.access_granted_to == 3
        assert view.owner == user_a
        assert view.title == "CBP Report 1"
        assert view.mime_type == "application/pdf"

    def test_missing_vault(self, user_a):
        records = [mk_health_record(user_a, 1)]
        assert visible_records_for_user(user_a, records, None) == []

    def test_foreign_vault(self, user_a, user_b):
        records = [mk_health_record(user_a, 1)]
        vault = mk_user_vault(user_b, record_ids=[1])
        assert visible_records_for_user(user_a, records, vault) == []

    def test_identity_as_string(self, user_a):
        records = [mk_health_record(user_a, 1)]
        vault = mk_user_vault(user_a, record_ids=[1])
        assert ids(visible_records_for_user(str(user_a), records, vault)) == [1]
        assert ids(visible_records_for_user(user_a.hex(), records, vault)) == [1]


class TestVisibleRecordsForOrganization:
    """Organization-scoped visibility"""

    def test_grant_list_not_trusted_for_activity(self, user_a, user_b, org_key, org_owner):
        org = mk_organization(org_owner, record_ids=[1, 2])
        records = [
            mk_health_record(user_a, 1, access_to=[org_key]),
            mk_health_record(user_b, 2, access_to=[org_key]),
        ]
        vaults = {
            user_a: mk_user_vault(user_a, record_ids=[1]),
            user_b: mk_user_vault(user_b, record_ids=[]),
        }
        assert ids(visible_records_for_organization(org_key, records, org, vaults)) == [1]

    def test_ungranted_records_excluded(self, user_a, org_key, org_owner):
        org = mk_organization(org_owner, record_ids=[1])
        records = [
            mk_health_record(user_a, 1, access_to=[org_key]),
            mk_health_record(user_a, 2, access_to=[org_key]),
        ]
        vaults = {user_a: mk_user_vault(user_a, record_ids=[1, 2])}
        assert ids(visible_records_for_organization(org_key, records, org, vaults)) == [1]

    def test_missing_vault_skips_only_that_owner(self, user_a, user_b, org_key, org_owner):
        org = mk_organization(org_owner, record_ids=[1, 2])
        records = [
            mk_health_record(user_a, 1, access_to=[org_key]),
            mk_health_record(user_b, 2, access_to=[org_key]),
        ]
        vaults = {user_b: mk_user_vault(user_b, record_ids=[2])}
        assert ids(visible_records_for_organization(org_key, records, org, vaults)) == [2]

    def test_access_entry_required_by_default(self, user_a, org_key, org_owner):
        org = mk_organization(org_owner, record_ids=[1, 2])
        records = [
            mk_health_record(user_a, 1, access_to=[org_key]),
            mk_health_record(user_a, 2, access_to=["someone-else"]),
        ]
        vaults = {user_a: mk_user_vault(user_a, record_ids=[1, 2])}
        assert ids(visible_records_for_organization(org_key, records, org, vaults)) == [1]

        relaxed = ReconcileOptions(require_access_entry=False)
        assert ids(visible_records_for_organization(org_key, records, org, vaults, relaxed)) == [1, 2]

    def test_callable_lookup(self, user_a, user_b, org_key, org_owner):
        org = mk_organization(org_owner, record_ids=[1, 2])
        records = [
            mk_health_record(user_a, 1, access_to=[org_key]),
            mk_health_record(user_b, 2, access_to=[org_key]),
        ]
        vault_a = mk_user_vault(user_a, record_ids=[1])
        calls = []

        def lookup(owner):
            calls.append(owner)
            if owner == user_a:
                return vault_a
            raise MissingAccountError("User vault account not found")

        assert ids(visible_records_for_organization(org_key, records, org, lookup)) == [1]
        assert calls == [user_a, user_b]

    def test_lookup_key_error_skips_only_that_owner(self, user_a, user_b, org_key, org_owner):
        org = mk_organization(org_owner, record_ids=[1, 2])
        records = [
            mk_health_record(user_b, 2, access_to=[org_key]),
            mk_health_record(user_a, 1, access_to=[org_key]),
        ]
        vaults = {user_a: mk_user_vault(user_a, record_ids=[1])}
        assert ids(visible_records_for_organization(org_key, records, org, vaults.__getitem__)) == [1]

    def test_vault_looked_up_once_per_owner(self, user_a, org_key, org_owner):
        org = mk_organization(org_owner, record_ids=[1, 2, 3])
        records = [mk_health_record(user_a, i, access_to=[org_key]) for i in (1, 2, 3)]
        calls = []

        def lookup(owner):
            calls.append(owner)
            return mk_user_vault(user_a, record_ids=[1, 2, 3])

        assert ids(visible_records_for_organization(org_key, records, org, lookup)) == [1, 2, 3]
        assert calls == [user_a]

    def test_iterable_of_vaults(self, user_a, org_key, org_owner):
        org = mk_organization(org_owner, record_ids=[1])
        records = [mk_health_record(user_a, 1, access_to=[org_key])]
        vaults = [mk_user_vault(user_a, record_ids=[1])]
        assert ids(visible_records_for_organization(org_key, records, org, vaults)) == [1]

    def test_mapping_keyed_by_base58(self, user_a, org_key, org_owner):
        org = mk_organization(org_owner, record_ids=[1])
        records = [mk_health_record(user_a, 1, access_to=[org_key])]
        vaults = {str(user_a): mk_user_vault(user_a, record_ids=[1])}
        assert ids(visible_records_for_organization(org_key, records, org, vaults)) == [1]

    def test_missing_organization(self, user_a, org_key):
        records = [mk_health_record(user_a, 1, access_to=[org_key])]
        vaults = {user_a: mk_user_vault(user_a, record_ids=[1])}
        assert visible_records_for_organization(org_key, records, None, vaults) == []


class TestProjection:
    """RecordView and dashboard counters"""

    def test_to_dict_uses_client_keys(self, user_a):
        view = RecordView.from_record(mk_health_record(user_a, 6, access_to=["o1"]))
        data = view.to_dict()
        assert data == {
            "id": 6,
            "title": "CBP Report 6",
            "description": "CBP report Vijaya Diagnostics",
            "createdAt": 1753008856,
            "accessGrantedTo": 1,
            "owner": str(user_a),
            "mimeType": "application/pdf",
        }

    def test_record_stats(self, user_a):
        records = [
            mk_health_record(user_a, 1, access_to=["o1", "o2"]),
            mk_health_record(user_a, 2),
            mk_health_record(user_a, 3, access_to=["o1"]),
        ]
        vault = mk_user_vault(user_a, record_ids=[1, 2, 3])
        stats = record_stats(visible_records_for_user(user_a, records, vault))
        assert stats == RecordStats(record_count=3, shared_count=3)

    def test_record_stats_empty(self):
        assert record_stats([]) == RecordStats()
