"""Provision the lottery engine and publish its config to the display layer."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from fairdraw.config import Settings
from fairdraw.db.engine import get_sessionmaker, make_engine
from fairdraw.workflows import provision_deployment, publish_display_config

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_DISPLAY_DIR = PROJECT_ROOT / "frontend" / "web" / "src"


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--admin", default=settings.admin_address,
                        help="admin identity (default: LOTTERY_ADMIN_ADDRESS)")
    parser.add_argument("--ticket-price", type=int, default=settings.ticket_price,
                        help="default ticket price in the smallest currency unit")
    parser.add_argument("--engine-address", default=settings.engine_address,
                        help="engine address; generated when omitted")
    parser.add_argument("--network", default=settings.network)
    parser.add_argument("--display-dir", type=Path, default=DEFAULT_DISPLAY_DIR,
                        help="directory that receives config.json")
    args = parser.parse_args(argv)
    if not args.admin:
        parser.error("an admin identity is required (--admin or LOTTERY_ADMIN_ADDRESS)")
    return args


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)

    engine = make_engine()
    Session = get_sessionmaker(engine)
    with Session.begin() as session:
        deployment = provision_deployment(
            session,
            admin_address=args.admin,
            ticket_price=args.ticket_price,
            engine_address=args.engine_address,
            network=args.network,
        )
    print("Engine address:", deployment.engine_address)
    print("Admin:", deployment.admin_address)

    written = publish_display_config(deployment, args.display_dir)
    if written is None:
        print(f"Display directory {args.display_dir} not found; config.json not written")
    engine.dispose()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
