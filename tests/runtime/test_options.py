"""
Option model tests.
"""

import pytest
from pydantic import ValidationError

from healthlock_client.options import DecodeOptions, ReconcileOptions


def test_defaults_match_mobile_client():
    assert DecodeOptions().degrade_access_list is True
    assert ReconcileOptions().require_access_entry is True


def test_aliases():
    assert DecodeOptions(degradeAccessList=False).degrade_access_list is False
    assert ReconcileOptions(requireAccessEntry=False).to_dict() == {"requireAccessEntry": False}
    assert DecodeOptions.model_validate({"degrade_access_list": False}).to_dict() == {"degradeAccessList": False}


def test_frozen():
    opts = DecodeOptions()
    with pytest.raises(ValidationError):
        opts.degrade_access_list = False
