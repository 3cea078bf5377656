"""Bind a lottery round to a future beacon round, then reveal it after the draw time.

``plan`` runs before ``createRound``: it picks the first beacon round published
at or after the draw time and prints the ``drand_round`` commitment to record.
Nobody, the operator included, can know that round's output while tickets are
on sale. ``reveal`` runs once the round is out and prints the winning number
and the salt to pass to ``draw``.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from fairdraw.beacon import BeaconClient
from fairdraw.config import Settings
from fairdraw.draw import DRAND_ROUND, beacon_commitment


def plan(client: BeaconClient, draw_time: int) -> int:
    info = client.chain_info()
    round_number = info.round_at(draw_time)
    print("Beacon round:", round_number)
    print("Published at:", info.round_time(round_number))
    print("Commitment scheme:", DRAND_ROUND)
    print("Commitment:", beacon_commitment(round_number))
    return 0


def reveal(client: BeaconClient, round_number: int) -> int:
    beacon_round = client.get_round(round_number)
    print("Beacon round:", beacon_round.round)
    print("Randomness:", beacon_round.randomness)
    print("Winning number:", beacon_round.winning_number)
    print("Salt:", beacon_round.reveal_salt)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    commands = parser.add_subparsers(dest="command", required=True)
    plan_parser = commands.add_parser("plan", help="commitment for a new round")
    plan_parser.add_argument("--draw-time", type=int, required=True,
                             help="draw time of the lottery round in epoch seconds")
    reveal_parser = commands.add_parser("reveal", help="reveal values for draw")
    reveal_parser.add_argument("--round", type=int, required=True,
                               help="beacon round recorded as the commitment")
    args = parser.parse_args(argv)

    client = BeaconClient(base_url=Settings.from_env().beacon_base_url)
    try:
        if args.command == "plan":
            return plan(client, args.draw_time)
        return reveal(client, args.round)
    except RuntimeError as exc:
        print(f"Beacon error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
