"""
Tests for the centralized ConfigManager.

This module tests the configuration management system to ensure it properly
handles environment variables, settings files and validation.
"""

import json
import os
import tempfile
import unittest
from pathlib import Path

from xml_dtd_validator.config.config_manager import (
    ConfigManager,
    ValidatorSettings,
    get_config_manager,
    reset_config_manager,
)
from xml_dtd_validator.config.processing_defaults import ValidationDefaults
from xml_dtd_validator.exceptions import ConfigurationError


ENV_VARS = [
    'DTD_VALIDATOR_LOG_LEVEL',
    'DTD_VALIDATOR_MAX_WORKERS',
    'DTD_VALIDATOR_EXECUTOR',
    'DTD_VALIDATOR_USE_PARSER_LINES',
    'DTD_VALIDATOR_TEXT_PREVIEW_LENGTH',
    'DTD_VALIDATOR_HUGE_TREE',
]


class EnvironmentTestCase(unittest.TestCase):
    """Clears DTD_VALIDATOR_* variables around each test."""

    def setUp(self):
        self._saved_env = {var: os.environ.pop(var) for var in ENV_VARS if var in os.environ}
        reset_config_manager()

    def tearDown(self):
        for var in ENV_VARS:
            os.environ.pop(var, None)
        os.environ.update(self._saved_env)
        reset_config_manager()


class TestValidatorSettings(EnvironmentTestCase):
    """Test ValidatorSettings class."""

    def test_default_configuration(self):
        settings = ValidatorSettings.from_environment()

        self.assertEqual(settings.log_level, ValidationDefaults.LOG_LEVEL)
        self.assertEqual(settings.max_workers, ValidationDefaults.MAX_WORKERS)
        self.assertEqual(settings.executor, "thread")
        self.assertTrue(settings.use_parser_lines)
        self.assertEqual(settings.text_preview_length, 20)
        self.assertFalse(settings.huge_tree)

    def test_environment_variable_override(self):
        os.environ['DTD_VALIDATOR_LOG_LEVEL'] = 'debug'
        os.environ['DTD_VALIDATOR_MAX_WORKERS'] = '8'
        os.environ['DTD_VALIDATOR_EXECUTOR'] = 'PROCESS'
        os.environ['DTD_VALIDATOR_USE_PARSER_LINES'] = 'false'
        os.environ['DTD_VALIDATOR_HUGE_TREE'] = 'true'

        settings = ValidatorSettings.from_environment()

        self.assertEqual(settings.log_level, 'DEBUG')
        self.assertEqual(settings.max_workers, 8)
        self.assertEqual(settings.executor, 'process')
        self.assertFalse(settings.use_parser_lines)
        self.assertTrue(settings.huge_tree)

    def test_invalid_numeric_value(self):
        os.environ['DTD_VALIDATOR_MAX_WORKERS'] = 'many'

        with self.assertRaises(ConfigurationError):
            ValidatorSettings.from_environment()

    def test_updated_returns_copy(self):
        settings = ValidatorSettings()
        changed = settings.updated({'max_workers': 2})

        self.assertEqual(changed.max_workers, 2)
        self.assertEqual(settings.max_workers, ValidationDefaults.MAX_WORKERS)

    def test_updated_rejects_unknown_keys(self):
        with self.assertRaises(ConfigurationError) as context:
            ValidatorSettings().updated({'batch_size': 10})
        self.assertIn('batch_size', str(context.exception))

    def test_updated_coerces_string_values(self):
        changed = ValidatorSettings().updated({'max_workers': "4", 'use_parser_lines': "false", 'huge_tree': "True"})

        self.assertEqual(changed.max_workers, 4)
        self.assertIs(changed.use_parser_lines, False)
        self.assertIs(changed.huge_tree, True)

    def test_updated_rejects_wrong_types(self):
        for overrides in ({'max_workers': "four"}, {'max_workers': True}, {'max_workers': 2.5},
                          {'use_parser_lines': "no"}, {'use_parser_lines': 0}, {'executor': 3}):
            with self.assertRaises(ConfigurationError, msg=str(overrides)):
                ValidatorSettings().updated(overrides)


class TestConfigManager(EnvironmentTestCase):
    """Test ConfigManager class."""

    def setUp(self):
        super().setUp()
        self.temp_dir = tempfile.TemporaryDirectory()
        self.temp_path = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()
        super().tearDown()

    def test_json_settings_file(self):
        path = self.temp_path / "settings.json"
        path.write_text(json.dumps({'max_workers': 3, 'use_parser_lines': False}), encoding='utf-8')

        manager = ConfigManager(path)

        self.assertEqual(manager.get_settings().max_workers, 3)
        self.assertFalse(manager.get_settings().use_parser_lines)
        self.assertEqual(manager.get_configuration_summary()['settings_file'], str(path))

    def test_yaml_settings_file(self):
        path = self.temp_path / "settings.yaml"
        path.write_text("executor: process\ntext_preview_length: 40\n", encoding='utf-8')

        manager = ConfigManager()
        manager.load_settings_file(path)

        self.assertEqual(manager.settings.executor, 'process')
        self.assertEqual(manager.settings.text_preview_length, 40)

    def test_yaml_string_values_coerced(self):
        path = self.temp_path / "settings.yml"
        path.write_text("max_workers: '4'\nuse_parser_lines: 'false'\n", encoding='utf-8')

        manager = ConfigManager(path)

        self.assertEqual(manager.settings.max_workers, 4)
        self.assertFalse(manager.settings.use_parser_lines)
        self.assertTrue(manager.validate_configuration())

    def test_settings_file_with_wrong_type(self):
        path = self.temp_path / "settings.json"
        path.write_text(json.dumps({'max_workers': [4]}), encoding='utf-8')

        with self.assertRaises(ConfigurationError):
            ConfigManager(path)

    def test_missing_settings_file(self):
        with self.assertRaises(ConfigurationError):
            ConfigManager(self.temp_path / "absent.json")

    def test_unsupported_settings_format(self):
        path = self.temp_path / "settings.ini"
        path.write_text("[x]\n", encoding='utf-8')

        with self.assertRaises(ConfigurationError):
            ConfigManager().load_settings_file(path)

    def test_settings_file_must_be_mapping(self):
        path = self.temp_path / "settings.json"
        path.write_text("[1, 2]", encoding='utf-8')

        with self.assertRaises(ConfigurationError):
            ConfigManager().load_settings_file(path)

    def test_malformed_json(self):
        path = self.temp_path / "settings.json"
        path.write_text("{not json", encoding='utf-8')

        with self.assertRaises(ConfigurationError):
            ConfigManager().load_settings_file(path)

    def test_validate_configuration(self):
        manager = ConfigManager()
        self.assertTrue(manager.validate_configuration())

        manager.settings = manager.settings.updated({'max_workers': 0, 'executor': 'fiber'})
        with self.assertRaises(ConfigurationError) as context:
            manager.validate_configuration()

        message = str(context.exception)
        self.assertIn("Max workers", message)
        self.assertIn("Executor", message)

    def test_reload_configuration(self):
        path = self.temp_path / "settings.json"
        path.write_text(json.dumps({'text_preview_length': 7}), encoding='utf-8')
        manager = ConfigManager(path)

        os.environ['DTD_VALIDATOR_MAX_WORKERS'] = '6'
        manager.reload_configuration()

        self.assertEqual(manager.settings.max_workers, 6)
        self.assertEqual(manager.settings.text_preview_length, 7)


class TestGlobalConfigManager(EnvironmentTestCase):

    def test_singleton(self):
        self.assertIs(get_config_manager(), get_config_manager())

    def test_reset(self):
        first = get_config_manager()
        reset_config_manager()
        self.assertIsNot(first, get_config_manager())


class TestValidationDefaults(unittest.TestCase):

    def test_to_dict(self):
        defaults = ValidationDefaults.to_dict()

        self.assertEqual(defaults['TEXT_PREVIEW_LENGTH'], 20)
        self.assertEqual(defaults['EXECUTOR'], 'thread')
        self.assertNotIn('to_dict', defaults)

    def test_log_summary(self):
        import logging
        logger = logging.getLogger('test.defaults')

        with self.assertLogs(logger, level='INFO') as captured:
            ValidationDefaults.log_summary(logger)

        self.assertIn('MAX_WORKERS: 4', captured.output[0])


if __name__ == '__main__':
    unittest.main()
