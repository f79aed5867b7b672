"""
Decoder and reconciliation options.

Typed option classes for the account decoders and the reconciliation engine.
Defaults reproduce the behaviour of the HealthLock mobile client.
"""

from __future__ import annotations
from typing import Any, Dict

from pydantic import BaseModel, Field


class DecodeOptions(BaseModel):
    """
    Options for account decoding.

    ``degrade_access_list`` keeps the mobile client's tolerance for a corrupt
    access-list count: the list decodes as empty and the remaining fields are
    still read. When disabled, the overrun fails the whole record.
    """
    degrade_access_list: bool = Field(
        default=True,
        alias="degradeAccessList",
        description="Decode an overrunning access list as empty instead of failing",
    )

    model_config = {"populate_by_name": True, "frozen": True}

    def to_dict(self) -> Dict[str, Any]:
        return {"degradeAccessList": self.degrade_access_list}


class ReconcileOptions(BaseModel):
    """
    Options for the organization-scoped reconciliation.

    With ``require_access_entry`` set, a granted and active record must also
    list the organization in its access list to be visible.
    """
    require_access_entry: bool = Field(
        default=True,
        alias="requireAccessEntry",
        description="Also require the organization in the record's access list",
    )

    model_config = {"populate_by_name": True, "frozen": True}

    def to_dict(self) -> Dict[str, Any]:
        return {"requireAccessEntry": self.require_access_entry}


DEFAULT_DECODE_OPTIONS = DecodeOptions()
DEFAULT_RECONCILE_OPTIONS = ReconcileOptions()
