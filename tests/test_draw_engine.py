from __future__ import annotations

import unittest

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from fairdraw.access import AccessControl
from fairdraw.draw import (
    CommitmentRegistry,
    CommitmentScheme,
    DrawEngine,
    make_commitment,
    match_winners,
)
from fairdraw.errors import (
    AlreadySettled,
    CommitmentMismatch,
    NumberOutOfRange,
    RoundNotFound,
    TooEarly,
    Unauthorized,
)
from fairdraw.models import Base, SettlementEvent, Ticket
from fairdraw.registration import RegistrationService
from fairdraw.store import RoundStore

NOW = 1_700_000_000
ADMIN = "operator"


class DrawEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )
        self.access = AccessControl(ADMIN)

    def tearDown(self) -> None:
        self.engine.dispose()

    def _seed(self, session, tickets, **round_kwargs) -> int:
        round_id = RoundStore(session).create_round(
            "Spring", NOW + 60, now=NOW, ticket_price=10, **round_kwargs
        )
        registration = RegistrationService(session)
        for buyer, number in tickets:
            registration.buy_ticket(round_id, buyer, number, 10, now=NOW)
        return round_id

    def test_winners_are_ticket_granular_in_purchase_order(self) -> None:
        with self.Session.begin() as session:
            round_id = self._seed(
                session,
                [("bob", 4242), ("alice", 1000), ("alice", 4242), ("bob", 4242)],
            )
            outcome = DrawEngine(session, self.access).draw(
                round_id, 4242, ADMIN, now=NOW + 60
            )

        self.assertEqual(outcome.winner_count, 3)
        self.assertEqual(outcome.winners, ("bob", "alice", "bob"))
        self.assertEqual(
            outcome.to_json(),
            {
                "round_id": round_id,
                "winning_number": 4242,
                "winner_count": 3,
                "winners": ["bob", "alice", "bob"],
            },
        )

    def test_no_matching_tickets(self) -> None:
        with self.Session.begin() as session:
            round_id = self._seed(session, [("alice", 1000)])
            outcome = DrawEngine(session, self.access).draw(
                round_id, 9999, ADMIN, now=NOW + 61
            )
            snapshot = RoundStore(session).get_round(round_id)

        self.assertEqual(outcome.winner_count, 0)
        self.assertEqual(outcome.winners, ())
        self.assertEqual(snapshot.state, "settled")
        self.assertEqual(snapshot.winning_number, 9999)

    def test_settlement_event_is_recorded(self) -> None:
        with self.Session.begin() as session:
            round_id = self._seed(session, [("alice", 4242)])
            DrawEngine(session, self.access).draw(round_id, 4242, ADMIN, now=NOW + 60)
            events = session.scalars(select(SettlementEvent)).all()

        self.assertEqual(len(events), 1)
        event = events[0]
        self.assertEqual(event.round_id, round_id)
        self.assertEqual(event.winning_number, 4242)
        self.assertEqual(event.winner_count, 1)
        self.assertEqual(event.settled_by, ADMIN)
        self.assertIsNotNone(event.to_json()["occurred_at"])

    def test_precondition_failures_leave_round_open(self) -> None:
        with self.Session.begin() as session:
            round_id = self._seed(session, [("alice", 4242)])
            engine = DrawEngine(session, self.access)

            with self.assertRaises(Unauthorized):
                engine.draw(round_id, 4242, "alice", now=NOW + 60)
            with self.assertRaises(TooEarly):
                engine.draw(round_id, 4242, ADMIN, now=NOW + 59)
            with self.assertRaises(NumberOutOfRange):
                engine.draw(round_id, 999, ADMIN, now=NOW + 60)
            with self.assertRaises(RoundNotFound):
                engine.draw(round_id + 1, 4242, ADMIN, now=NOW + 60)

            snapshot = RoundStore(session).get_round(round_id)
            self.assertEqual(snapshot.state, "open")
            self.assertIsNone(snapshot.winning_number)
            self.assertEqual(session.scalars(select(SettlementEvent)).all(), [])

    def test_settled_round_rejects_any_second_draw(self) -> None:
        with self.Session.begin() as session:
            round_id = self._seed(session, [])
            engine = DrawEngine(session, self.access)
            engine.draw(round_id, 1234, ADMIN, now=NOW + 60)
            with self.assertRaises(AlreadySettled):
                engine.draw(round_id, 10000, ADMIN, now=NOW + 60)
            self.assertEqual(RoundStore(session).get_round(round_id).winning_number, 1234)

    def test_commitment_must_open(self) -> None:
        commitment = make_commitment(4242, "pepper")
        with self.Session.begin() as session:
            round_id = self._seed(
                session,
                [("alice", 4242)],
                commitment=commitment,
                commitment_scheme="sha256_salted",
            )
            engine = DrawEngine(session, self.access)
            with self.assertRaises(CommitmentMismatch):
                engine.draw(round_id, 4242, ADMIN, now=NOW + 60, salt="salt")
            with self.assertRaises(CommitmentMismatch):
                engine.draw(round_id, 4243, ADMIN, now=NOW + 60, salt="pepper")
            outcome = engine.draw(round_id, 4242, ADMIN, now=NOW + 60, salt="pepper")

        self.assertEqual(outcome.winners, ("alice",))

    def test_unknown_scheme_on_stored_round(self) -> None:
        with self.Session.begin() as session:
            round_id = self._seed(
                session, [], commitment="00", commitment_scheme="retired"
            )
            with self.assertRaises(CommitmentMismatch):
                DrawEngine(session, self.access).draw(
                    round_id, 4242, ADMIN, now=NOW + 60
                )

    def test_custom_commitment_registry(self) -> None:
        registry = CommitmentRegistry()
        registry.register(
            CommitmentScheme(
                key="plain",
                verifier=lambda commitment, number, salt: commitment == str(number),
            )
        )
        with self.Session.begin() as session:
            round_id = self._seed(
                session, [("alice", 5555)], commitment="5555", commitment_scheme="plain"
            )
            outcome = DrawEngine(session, self.access, registry=registry).draw(
                round_id, 5555, ADMIN, now=NOW + 60
            )
        self.assertEqual(outcome.winner_count, 1)


class MatchWinnersTests(unittest.TestCase):
    def test_match_is_independent_of_buyer_identity(self) -> None:
        tickets = [
            Ticket(buyer="x", number=1000, amount=1, seq=0, purchased_at=NOW),
            Ticket(buyer="y", number=2000, amount=1, seq=1, purchased_at=NOW),
            Ticket(buyer="x", number=1000, amount=1, seq=2, purchased_at=NOW),
        ]
        self.assertEqual(match_winners(tickets, 1000), ("x", "x"))
        self.assertEqual(match_winners(tickets, 3000), ())
        self.assertEqual(match_winners([], 1000), ())


if __name__ == "__main__":
    unittest.main()
