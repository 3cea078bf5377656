import json
import tempfile
import unittest
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from fairdraw import Lottery
from fairdraw.errors import InvalidInput, NotProvisioned
from fairdraw.models import Base, Deployment
from fairdraw.workflows import (
    INTERFACE_DESCRIPTION,
    build_display_config,
    generate_engine_address,
    provision_deployment,
    publish_display_config,
)

ADMIN = "0x" + "AD" * 20


class ProvisioningWorkflowTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )

    def tearDown(self):
        self.engine.dispose()

    def test_lottery_requires_a_deployment(self):
        with self.assertRaises(NotProvisioned):
            Lottery(self.Session)

    def test_provision_deployment_fixes_admin(self):
        with self.Session.begin() as session:
            deployment = provision_deployment(
                session, admin_address=ADMIN, ticket_price=25, network="sepolia"
            )

        self.assertEqual(deployment.admin_address, ADMIN.lower())
        self.assertTrue(deployment.engine_address.startswith("0x"))
        self.assertEqual(len(deployment.engine_address), 42)

        lottery = Lottery(self.Session)
        self.assertEqual(lottery.admin, ADMIN.lower())
        self.assertEqual(lottery.default_ticket_price, 25)
        self.assertEqual(lottery.engine_address, deployment.engine_address)

    def test_second_provisioning_is_rejected(self):
        with self.Session.begin() as session:
            provision_deployment(session, admin_address=ADMIN, ticket_price=10)
        with self.Session.begin() as session:
            with self.assertRaises(InvalidInput):
                provision_deployment(
                    session, admin_address="0x" + "ee" * 20, ticket_price=10
                )
        with self.Session() as session:
            self.assertEqual(Deployment.current(session).admin_address, ADMIN.lower())

    def test_provision_rejects_bad_price(self):
        with self.Session.begin() as session:
            with self.assertRaises(InvalidInput):
                provision_deployment(session, admin_address=ADMIN, ticket_price=-5)
            with self.assertRaises(InvalidInput):
                provision_deployment(session, admin_address=ADMIN, ticket_price="10")

    def test_publish_display_config(self):
        with self.Session.begin() as session:
            deployment = provision_deployment(
                session,
                admin_address=ADMIN,
                ticket_price=10,
                engine_address="0x" + "12" * 20,
                network="local",
            )

        with tempfile.TemporaryDirectory() as tmpdir:
            path = publish_display_config(deployment, Path(tmpdir))
            self.assertEqual(path, Path(tmpdir) / "config.json")
            payload = json.loads(path.read_text(encoding="utf-8"))

        self.assertEqual(payload, build_display_config(deployment))
        self.assertEqual(payload["engineAddress"], "0x" + "12" * 20)
        self.assertEqual(payload["deployer"], ADMIN.lower())
        self.assertEqual(payload["network"], "local")
        names = {op["name"] for op in payload["interface"]}
        self.assertEqual(names, {op["name"] for op in INTERFACE_DESCRIPTION})
        self.assertIn("draw", names)

    def test_publish_skips_missing_directory(self):
        with self.Session.begin() as session:
            deployment = provision_deployment(session, admin_address=ADMIN, ticket_price=10)
        with tempfile.TemporaryDirectory() as tmpdir:
            missing = Path(tmpdir) / "frontend" / "web" / "src"
            self.assertIsNone(publish_display_config(deployment, missing))
            self.assertFalse(missing.exists())

    def test_generated_addresses_differ(self):
        self.assertNotEqual(generate_engine_address(), generate_engine_address())


if __name__ == "__main__":
    unittest.main()
