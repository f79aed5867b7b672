"""
Test bootstrap: shared identities and account fixtures.
"""
import pytest

from helpers.factories import mk_identifier


@pytest.fixture
def user_a():
    """Identity of the first patient."""
    return mk_identifier("user-a")


@pytest.fixture
def user_b():
    """Identity of the second patient."""
    return mk_identifier("user-b")


@pytest.fixture
def org_key():
    """Organization account identity, as written in access lists."""
    return mk_identifier("org-account")


@pytest.fixture
def org_owner():
    """Wallet that registered the organization."""
    return mk_identifier("org-owner")
