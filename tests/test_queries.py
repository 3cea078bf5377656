import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from fairdraw.access import AccessControl
from fairdraw.draw import DrawEngine
from fairdraw.errors import NotFound
from fairdraw.models import Base, Round, SettlementEvent
from fairdraw.queries import QueryService
from fairdraw.registration import RegistrationService
from fairdraw.store import RoundStore

NOW = 1_700_000_000
ADMIN = "operator"


class QueryServiceTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )
        with self.Session.begin() as session:
            store = RoundStore(session)
            registration = RegistrationService(session, store=store)
            # ids 0..2 with draw times deliberately out of creation order
            self.early = store.create_round("Early", NOW + 10, now=NOW, ticket_price=10)
            self.late = store.create_round("Late", NOW + 500, now=NOW, ticket_price=20)
            self.middle = store.create_round("Middle", NOW + 100, now=NOW, ticket_price=10)

            for buyer, number in [("alice", 4242), ("bob", 4242), ("alice", 4242), ("carol", 1111)]:
                registration.buy_ticket(self.early, buyer, number, 10, now=NOW)
            registration.buy_ticket(self.late, "dave", 2000, 20, now=NOW)

            DrawEngine(session, AccessControl(ADMIN), store=store).draw(
                self.early, 4242, ADMIN, now=NOW + 10
            )

    def tearDown(self):
        self.engine.dispose()

    def test_list_rounds_sorted_by_draw_time_descending(self):
        with self.Session() as session:
            rounds = QueryService(session).list_rounds()

        self.assertEqual([r.id for r in rounds], [self.late, self.middle, self.early])
        self.assertTrue(all(r.tickets == () for r in rounds))
        summary = rounds[-1].to_json()
        self.assertTrue(summary["drawn"])
        self.assertEqual(summary["winner_count"], 3)
        self.assertNotIn("tickets", summary)

    def test_equal_draw_times_list_newest_round_first(self):
        with self.Session.begin() as session:
            store = RoundStore(session)
            a = store.create_round("A", NOW + 9000, now=NOW, ticket_price=1)
            b = store.create_round("B", NOW + 9000, now=NOW, ticket_price=1)
            rounds = QueryService(session).list_rounds()
        self.assertEqual([r.id for r in rounds[:2]], [b, a])

    def test_get_winners_keeps_duplicates_in_purchase_order(self):
        with self.Session() as session:
            winners = QueryService(session).get_winners(self.early)
        self.assertEqual(winners, ["alice", "bob", "alice"])

    def test_get_winners_empty_for_open_round(self):
        with self.Session() as session:
            service = QueryService(session)
            self.assertEqual(service.get_winners(self.late), [])
            with self.assertRaises(NotFound):
                service.get_winners(42)

    def test_get_winners_empty_when_nobody_matched(self):
        with self.Session.begin() as session:
            DrawEngine(session, AccessControl(ADMIN)).draw(
                self.late, 9999, ADMIN, now=NOW + 500
            )
            self.assertEqual(QueryService(session).get_winners(self.late), [])

    def test_aggregate_stats(self):
        with self.Session() as session:
            stats = QueryService(session).aggregate_stats()

        self.assertEqual(stats.active_rounds, 2)
        self.assertEqual(stats.settled_rounds, 1)
        self.assertEqual(stats.total_amount, 60)
        self.assertEqual(stats.total_tickets, 5)
        self.assertEqual(stats.total_winners, 3)
        self.assertEqual(
            stats.to_json(),
            {
                "active_rounds": 2,
                "settled_rounds": 1,
                "total_amount": 60,
                "total_tickets": 5,
                "total_winners": 3,
            },
        )

    def test_aggregate_stats_on_empty_store(self):
        engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(engine)
        try:
            with sessionmaker(bind=engine, future=True)() as session:
                stats = QueryService(session).aggregate_stats()
        finally:
            engine.dispose()
        self.assertEqual(
            (stats.active_rounds, stats.settled_rounds, stats.total_amount,
             stats.total_tickets, stats.total_winners),
            (0, 0, 0, 0, 0),
        )

    def test_get_round_includes_tickets(self):
        with self.Session() as session:
            service = QueryService(session)
            snapshot = service.get_round(self.early)
            self.assertEqual(service.rounds_count(), 3)

        self.assertEqual(len(snapshot.tickets), 4)
        payload = snapshot.to_json(include_tickets=True)
        self.assertEqual(payload["tickets"][3]["buyer"], "carol")
        self.assertEqual(payload["winning_number"], 4242)

    def test_settlement_events(self):
        with self.Session() as session:
            service = QueryService(session)
            events = service.settlement_events()
            self.assertEqual([e.round_id for e in events], [self.early])
            self.assertEqual(service.settlement_events(self.late), [])
            self.assertEqual(
                [e.winning_number for e in service.settlement_events(self.early)], [4242]
            )

    def test_winning_tickets_and_event_lookup(self):
        with self.Session() as session:
            early = session.get(Round, self.early)
            self.assertEqual([t.seq for t in early.winning_tickets()], [0, 1, 2])
            self.assertEqual(session.get(Round, self.late).winning_tickets(), [])

            event = SettlementEvent.for_round(session, self.early)
            self.assertEqual(event.winner_count, 3)
            self.assertIsNone(SettlementEvent.for_round(session, self.late))


if __name__ == "__main__":
    unittest.main()
