import time

from fairdraw import Lottery, make_commitment
from fairdraw.db.engine import get_sessionmaker, make_engine
from fairdraw.models import Base
from fairdraw.workflows import provision_deployment

ADMIN = "0x00000000000000000000000000000000000000ad"
PLAYERS = [
    "0x000000000000000000000000000000000000a11c",
    "0x0000000000000000000000000000000000000b0b",
    "0x00000000000000000000000000000000000ca201",
]


def main() -> None:
    """Seed the development database with sample rounds."""
    engine = make_engine()

    # Recreate every table from the models for a clean dev database.
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    Session = get_sessionmaker(engine)

    with Session.begin() as session:
        provision_deployment(
            session, admin_address=ADMIN, ticket_price=10, network="local"
        )

    # A movable clock lets the script settle a round without waiting.
    now = int(time.time())
    clock = {"t": now}
    lottery = Lottery(Session, clock=lambda: clock["t"])

    spring = lottery.create_round("Spring Draw", now + 60, ADMIN)
    for player, number in zip(PLAYERS, (4242, 4242, 1000)):
        lottery.buy_ticket(spring, player, number, 10)

    salt = "dev-seed"
    committed = lottery.create_round(
        "Committed Draw",
        now + 3600,
        ADMIN,
        ticket_price=25,
        commitment=make_commitment(7777, salt),
    )
    lottery.buy_ticket(committed, PLAYERS[0], 7777, 25)
    lottery.buy_ticket(committed, PLAYERS[1], 1234, 25)

    lottery.create_round("Summer Draw", now + 86400, ADMIN)

    clock["t"] = now + 120
    outcome = lottery.draw(spring, 4242, ADMIN)
    print(f"Settled round {spring}: {outcome.winner_count} winner(s)")

    for summary in lottery.list_rounds():
        print(summary.to_json())
    print(lottery.aggregate_stats().to_json())
    engine.dispose()


if __name__ == "__main__":
    main()
