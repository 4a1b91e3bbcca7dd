import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from drawnumber.model.configuration import (
    CONFIG_ENV,
    DEFAULT_CONFIG_FILE,
    Configuration,
    ConfigurationError,
    parse_configuration,
    read_configuration,
    resolve_config_path,
)

from tests.utils import write_config


class TestConfiguration(unittest.TestCase):
    def test_defaults(self):
        configuration = Configuration()
        self.assertEqual((configuration.minimum, configuration.maximum, configuration.attempts), (0, 100, 10))
        self.assertTrue(configuration.is_consistent())

    def test_inconsistent(self):
        self.assertFalse(Configuration(attempts=0).is_consistent())
        self.assertFalse(Configuration(minimum=5, maximum=5).is_consistent())
        self.assertFalse(Configuration(minimum=10, maximum=1).is_consistent())

    def test_replace(self):
        configuration = Configuration().replace(maximum=20)
        self.assertEqual(configuration.as_dict(), {"minimum": 0, "maximum": 20, "attempts": 10})

    def test_parse_ignores_unknown_keys(self):
        configuration = parse_configuration({"Minimum": 3, "colour": "red"})
        self.assertEqual(configuration, Configuration(minimum=3))

    def test_parse_empty_document(self):
        self.assertEqual(parse_configuration(None), Configuration())


class TestReadConfiguration(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def test_reads_case_insensitive_keys(self):
        path = write_config(self.tmp, "Minimum: 5\nMAXIMUM: 50\nattempts: 3\nextra: x\n")
        self.assertEqual(read_configuration(path), Configuration(minimum=5, maximum=50, attempts=3))

    def test_missing_keys_keep_defaults(self):
        path = write_config(self.tmp, "attempts: 4\n")
        self.assertEqual(read_configuration(path), Configuration(attempts=4))

    def test_quoted_integer(self):
        path = write_config(self.tmp, "maximum: '7'\n")
        self.assertEqual(read_configuration(path).maximum, 7)

    def test_non_integer_value(self):
        path = write_config(self.tmp, "attempts: ten\n")
        with self.assertRaises(ConfigurationError) as ctx:
            read_configuration(path)
        self.assertIn("attempts", str(ctx.exception))

    def test_boolean_value_rejected(self):
        path = write_config(self.tmp, "attempts: true\n")
        with self.assertRaises(ConfigurationError):
            read_configuration(path)

    def test_missing_file(self):
        with self.assertRaises(ConfigurationError):
            read_configuration(os.path.join(self.tmp, "absent.yml"))

    def test_error_is_value_error(self):
        self.assertTrue(issubclass(ConfigurationError, ValueError))

    def test_invalid_utf8(self):
        path = os.path.join(self.tmp, "config.yml")
        with open(path, "wb") as f:
            f.write(b"minimum: \xff\xfe\n")
        with self.assertRaises(ConfigurationError) as ctx:
            read_configuration(path)
        self.assertIn("UTF-8", str(ctx.exception))

    def test_malformed_yaml(self):
        path = write_config(self.tmp, "minimum: [1, 2\n")
        with self.assertRaises(ConfigurationError):
            read_configuration(path)

    def test_document_must_be_mapping(self):
        path = write_config(self.tmp, "- 1\n- 2\n")
        with self.assertRaises(ConfigurationError):
            read_configuration(path)

    def test_empty_file(self):
        path = write_config(self.tmp, "")
        self.assertEqual(read_configuration(path), Configuration())

    def test_packaged_file(self):
        self.assertTrue(DEFAULT_CONFIG_FILE.exists())
        self.assertEqual(read_configuration(DEFAULT_CONFIG_FILE), Configuration())


class TestResolveConfigPath(unittest.TestCase):
    def test_explicit_path_wins(self):
        with mock.patch.dict(os.environ, {CONFIG_ENV: "/from/env.yml"}):
            self.assertEqual(resolve_config_path("given.yml"), Path("given.yml"))

    def test_environment(self):
        with mock.patch.dict(os.environ, {CONFIG_ENV: "/from/env.yml"}):
            self.assertEqual(resolve_config_path(), Path("/from/env.yml"))

    def test_default(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(resolve_config_path(), DEFAULT_CONFIG_FILE)


if __name__ == "__main__":
    unittest.main()
