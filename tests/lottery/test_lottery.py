"""
Lottery ticket aggregation tests.
"""

from healthlock_client.accounts import LotteryPool, PoolStatus, Ticket, UserTicket, decode_user_ticket, encode_account
from healthlock_client.lottery import pool_has_participant, summarize_tickets, tickets_for_user

from helpers.factories import mk_identifier


def mk_user_ticket(user, pool_id, *tickets):
    return UserTicket(
        user=user,
        pool=mk_identifier(f"pool-{pool_id}"),
        pool_id=pool_id,
        tickets=[Ticket(ticket_number=n, amount_paid=amt, timestamp=ts) for n, amt, ts in tickets],
        bump=250,
    )


class TestTicketAggregation:
    """Per-pool summaries for one participant"""

    def test_filters_by_user(self, user_a, user_b):
        accounts = [mk_user_ticket(user_a, 1, (1, 100, 10)), mk_user_ticket(user_b, 1, (2, 100, 11))]
        assert tickets_for_user(user_a, accounts) == [accounts[0]]

    def test_summaries(self, user_a, user_b):
        accounts = [
            mk_user_ticket(user_a, 2, (1, 100, 10), (2, 150, 30)),
            mk_user_ticket(user_b, 2, (3, 999, 99)),
            mk_user_ticket(user_a, 1, (7, 50, 20)),
        ]
        summaries = summarize_tickets(user_a, accounts)
        assert [(s.pool_id, s.ticket_count, s.amount_paid, s.latest_timestamp) for s in summaries] == [
            (2, 2, 250, 30),
            (1, 1, 50, 20),
        ]

    def test_empty_ticket_account(self, user_a):
        [summary] = summarize_tickets(user_a, [mk_user_ticket(user_a, 3)])
        assert summary.ticket_count == 0
        assert summary.latest_timestamp is None

    def test_decoded_accounts(self, user_a):
        account = mk_user_ticket(user_a, 4, (1, 100, 10))
        decoded = decode_user_ticket(encode_account(account))
        assert summarize_tickets(user_a, [decoded])[0].amount_paid == 100

    def test_pool_has_participant(self, user_a, user_b):
        pool = LotteryPool(
            pool_id=1,
            status=PoolStatus.ACTIVE,
            prize_pool=0,
            participants=[user_a],
            tickets_sold=1,
            draw_interval=3600,
            draw_time=0,
            created_at=0,
            bump=1,
        )
        assert pool_has_participant(pool, user_a)
        assert pool_has_participant(pool, str(user_a))
        assert not pool_has_participant(pool, user_b)
