import logging
import unittest
from unittest.mock import patch

from pydantic import ValidationError

import sys
import os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from vectorkg.config import GraphConfig, Settings
from vectorkg.logger import get_logger

class TestConfig(unittest.TestCase):

    def test_graph_config_is_frozen(self):
        config = GraphConfig(embedding_dim=8)
        with self.assertRaises(ValidationError):
            config.embedding_dim = 16

    def test_graph_config_validates_ranges(self):
        with self.assertRaises(ValidationError):
            GraphConfig(embedding_dim=0)
        with self.assertRaises(ValidationError):
            GraphConfig(seed=-1)
        with self.assertRaises(ValidationError):
            GraphConfig(unknown_option=True)

    @patch.dict(os.environ, {"EMBEDDING_DIM": "16", "EMBEDDING_SEED": "9", "DEDUPE_TEXTS": "true"})
    def test_settings_read_environment(self):
        config = GraphConfig.from_settings(Settings())
        self.assertEqual(config.embedding_dim, 16)
        self.assertEqual(config.seed, 9)
        self.assertTrue(config.dedupe_texts)

class TestLogger(unittest.TestCase):

    def test_logger_is_configured_once(self):
        logger = get_logger("vectorkg.tests")
        again = get_logger("vectorkg.tests")
        self.assertIs(logger, again)
        self.assertEqual(len(logger.handlers), 1)
        self.assertIsInstance(logger.handlers[0], logging.StreamHandler)

if __name__ == '__main__':
    unittest.main()
