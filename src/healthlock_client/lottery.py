"""
Lottery ticket aggregation.

Groups a participant's UserTicket accounts into per-pool summaries.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from .accounts.models import LotteryPool, UserTicket
from .runtime.identifier import IdentifierLike, as_identifier


class TicketSummary(BaseModel):
    pool_id: int = Field(ge=0)
    ticket_count: int = Field(default=0, ge=0)
    amount_paid: int = Field(default=0, ge=0)
    latest_timestamp: Optional[int] = None


def tickets_for_user(user_identity: IdentifierLike, tickets: Iterable[UserTicket]) -> List[UserTicket]:
    user = as_identifier(user_identity)
    return [t for t in tickets if t.user == user]


def summarize_tickets(user_identity: IdentifierLike, tickets: Iterable[UserTicket]) -> List[TicketSummary]:
    """
    Per-pool ticket totals for a user, ordered by first appearance of the pool.
    """
    totals: Dict[int, Dict[str, Optional[int]]] = {}
    for account in tickets_for_user(user_identity, tickets):
        entry = totals.setdefault(
            account.pool_id, {"ticket_count": 0, "amount_paid": 0, "latest_timestamp": None}
        )
        for ticket in account.tickets:
            entry["ticket_count"] += 1
            entry["amount_paid"] += ticket.amount_paid
            latest = entry["latest_timestamp"]
            if latest is None or ticket.timestamp > latest:
                entry["latest_timestamp"] = ticket.timestamp
    return [TicketSummary(pool_id=pool_id, **entry) for pool_id, entry in totals.items()]


def pool_has_participant(pool: LotteryPool, identity: IdentifierLike) -> bool:
    return as_identifier(identity) in pool.participants
