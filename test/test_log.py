"""
Unit tests for the logging helper and the settings model.
"""

import logging
import unittest
import sys
import os

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from simvault.config import VaultSettings
from simvault.log import setup_logger


class TestSetupLogger(unittest.TestCase):
    def setUp(self):
        self.settings = VaultSettings(_env_file=None, log_level="WARNING", log_file="")

    def test_level_and_handler(self):
        logger = setup_logger("simvault.test.level", level="debug", settings=self.settings)

        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)

    def test_level_from_settings(self):
        logger = setup_logger("simvault.test.settings", settings=self.settings)
        self.assertEqual(logger.level, logging.WARNING)

    def test_reconfigure_without_duplicate_handlers(self):
        """Test that a second call only changes the level"""
        setup_logger("simvault.test.dup", level="INFO", settings=self.settings)
        logger = setup_logger("simvault.test.dup", level=logging.ERROR, settings=self.settings)

        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logger.level, logging.ERROR)

    def test_unknown_level(self):
        with self.assertRaises(ValueError):
            setup_logger("simvault.test.bad", level="LOUD", settings=self.settings)


class TestVaultSettings(unittest.TestCase):
    def test_defaults(self):
        settings = VaultSettings(_env_file=None)
        self.assertEqual(settings.collateral_ratio, 15000)
        self.assertEqual(settings.min_collateral_ratio, 11000)
        self.assertEqual(settings.max_collateral_ratio, 20000)
        self.assertEqual(settings.adjustment_coefficient, 100)
        self.assertEqual(settings.collateral_decimals, 18)

    def test_environment_override(self):
        os.environ["SIMVAULT_ADJUSTMENT_COEFFICIENT"] = "250"
        try:
            settings = VaultSettings(_env_file=None)
        finally:
            del os.environ["SIMVAULT_ADJUSTMENT_COEFFICIENT"]
        self.assertEqual(settings.adjustment_coefficient, 250)


if __name__ == '__main__':
    unittest.main()
