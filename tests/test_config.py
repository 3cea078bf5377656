import os
import unittest
from unittest.mock import patch

from fairdraw.config import DEFAULT_NETWORK, DEFAULT_TICKET_PRICE, Settings


@patch("fairdraw.config.load_dotenv")
class SettingsFromEnvTests(unittest.TestCase):
    def test_defaults_when_unset(self, mock_load_dotenv):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_env()
        mock_load_dotenv.assert_called_once()
        self.assertIsNone(settings.db_url)
        self.assertIsNone(settings.admin_address)
        self.assertEqual(settings.ticket_price, DEFAULT_TICKET_PRICE)
        self.assertEqual(settings.network, DEFAULT_NETWORK)
        self.assertIsNone(settings.beacon_base_url)

    def test_values_from_environment(self, mock_load_dotenv):
        env = {
            "DB_URL": "sqlite:///./lottery.db",
            "LOTTERY_ADMIN_ADDRESS": "0x" + "ad" * 20,
            "LOTTERY_TICKET_PRICE": "25",
            "LOTTERY_ENGINE_ADDRESS": "0x" + "12" * 20,
            "LOTTERY_NETWORK": "sepolia",
            "BEACON_BASE_URL": "https://beacon.example.com",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env()
        self.assertEqual(settings.db_url, "sqlite:///./lottery.db")
        self.assertEqual(settings.admin_address, "0x" + "ad" * 20)
        self.assertEqual(settings.ticket_price, 25)
        self.assertEqual(settings.network, "sepolia")
        self.assertEqual(settings.beacon_base_url, "https://beacon.example.com")

    def test_malformed_price(self, mock_load_dotenv):
        with patch.dict(os.environ, {"LOTTERY_TICKET_PRICE": "ten"}, clear=True):
            with self.assertRaises(ValueError):
                Settings.from_env()


if __name__ == "__main__":
    unittest.main()
