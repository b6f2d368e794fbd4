#!/usr/bin/env python3
# File: test_config.py

import os
import sys
import json
import shutil
import tempfile
import unittest
from unittest.mock import patch

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from newspaper_metadata.config import MetadataConfig, ConfigManager


class TestMetadataConfig(unittest.TestCase):
    """Test cases for configuration values."""

    def test_defaults_are_valid(self):
        config = MetadataConfig()
        self.assertEqual(config.validate(), [])
        self.assertEqual(config.solr_batch_size, 10000)
        self.assertFalse(config.use_solr_for_issues)

    def test_trailing_slashes_stripped(self):
        config = MetadataConfig(fedora_url='http://example.org/fedora/', solr_url='http://example.org/solr//')
        self.assertEqual(config.fedora_url, 'http://example.org/fedora')
        self.assertEqual(config.solr_url, 'http://example.org/solr')

    def test_validate(self):
        config = MetadataConfig(fedora_url='ftp://example.org', solr_batch_size=0, solr_date_field='')
        errors = config.validate()
        self.assertEqual(len(errors), 3)

    def test_solr_url_only_checked_when_used(self):
        self.assertEqual(MetadataConfig(solr_url='nowhere').validate(), [])
        self.assertEqual(len(MetadataConfig(solr_url='nowhere', use_solr_for_issues=True).validate()), 1)

    def test_from_dict_ignores_unknown_keys(self):
        config = MetadataConfig.from_dict({'solr_batch_size': 500, 'theme': 'dark'})
        self.assertEqual(config.solr_batch_size, 500)


@patch.dict(os.environ, {}, clear=True)
@patch('newspaper_metadata.config.load_dotenv')
class TestConfigManager(unittest.TestCase):
    """Test cases for loading and saving configuration files."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.temp_dir, 'config', 'newspaper_metadata.json')

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_missing_file_uses_defaults(self, load_dotenv):
        manager = ConfigManager(self.config_file)
        self.assertEqual(manager.config, MetadataConfig())
        load_dotenv.assert_called_once()

    def test_save_and_load(self, load_dotenv):
        manager = ConfigManager(self.config_file)
        manager.config.use_solr_for_issues = True
        manager.config.solr_batch_size = 250
        self.assertTrue(manager.save_config())

        with open(self.config_file, 'r', encoding='utf-8') as f:
            self.assertEqual(json.load(f)['solr_batch_size'], 250)

        reloaded = ConfigManager(self.config_file)
        self.assertTrue(reloaded.config.use_solr_for_issues)
        self.assertEqual(reloaded.config.solr_batch_size, 250)

    def test_invalid_file(self, load_dotenv):
        os.makedirs(os.path.dirname(self.config_file))
        with open(self.config_file, 'w', encoding='utf-8') as f:
            f.write('{not json')

        manager = ConfigManager(self.config_file)
        self.assertFalse(manager.load_config(self.config_file))
        self.assertEqual(manager.config, MetadataConfig())

    def test_environment_overrides(self, load_dotenv):
        with patch.dict(os.environ, {'FEDORA_URL': 'https://repo.example.org/fedora/',
                                     'FEDORA_PASSWORD': 'secret'}):
            manager = ConfigManager(self.config_file)
        self.assertEqual(manager.config.fedora_url, 'https://repo.example.org/fedora')
        self.assertEqual(manager.config.fedora_password, 'secret')
        self.assertEqual(manager.config.solr_url, MetadataConfig().solr_url)

    def test_reset_to_defaults(self, load_dotenv):
        manager = ConfigManager(self.config_file)
        manager.config.request_timeout = -1
        self.assertEqual(len(manager.validate_config()), 1)
        manager.reset_to_defaults()
        self.assertEqual(manager.validate_config(), [])


if __name__ == '__main__':
    unittest.main()
