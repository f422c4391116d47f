"""
Tests for config.py.

Coverage:
  - GeneratorConfig.from_env → defaults, overrides, missing key, bad GEN_MAX_TRIES
  - GeneratorConfig          → direct construction guards
  - daily_dir_from_env       → default and override
"""

import unittest

from constraint.config import (
    DEFAULT_DAILY_DIR,
    DEFAULT_MAX_TRIES,
    DEFAULT_MODEL,
    ConfigError,
    GeneratorConfig,
    daily_dir_from_env,
)


class TestFromEnv(unittest.TestCase):

    def test_defaults(self):
        config = GeneratorConfig.from_env({"ANTHROPIC_API_KEY": "key"})
        self.assertEqual(config.api_key, "key")
        self.assertEqual(config.model, DEFAULT_MODEL)
        self.assertEqual(config.max_tries, DEFAULT_MAX_TRIES)
        self.assertEqual(config.max_tries, 3)
        self.assertEqual(config.daily_dir, DEFAULT_DAILY_DIR)

    def test_overrides(self):
        config = GeneratorConfig.from_env({
            "ANTHROPIC_API_KEY": "key",
            "CONSTRAINT_MODEL": "claude-haiku-4-5",
            "GEN_MAX_TRIES": "5",
            "CONSTRAINT_DAILY_DIR": "/srv/constraint/daily",
        })
        self.assertEqual(config.model, "claude-haiku-4-5")
        self.assertEqual(config.max_tries, 5)
        self.assertEqual(config.daily_dir, "/srv/constraint/daily")

    def test_blank_values_fall_back_to_defaults(self):
        config = GeneratorConfig.from_env({
            "ANTHROPIC_API_KEY": "key",
            "CONSTRAINT_MODEL": "",
            "GEN_MAX_TRIES": "",
        })
        self.assertEqual(config.model, DEFAULT_MODEL)
        self.assertEqual(config.max_tries, DEFAULT_MAX_TRIES)

    def test_missing_api_key(self):
        for env in ({}, {"ANTHROPIC_API_KEY": ""}):
            with self.assertRaises(ConfigError) as ctx:
                GeneratorConfig.from_env(env)
            self.assertIn("ANTHROPIC_API_KEY", str(ctx.exception))

    def test_bad_max_tries(self):
        for raw in ("three", "0", "-2", "1.5"):
            with self.subTest(raw=raw):
                with self.assertRaises(ConfigError):
                    GeneratorConfig.from_env({"ANTHROPIC_API_KEY": "key", "GEN_MAX_TRIES": raw})


class TestGeneratorConfig(unittest.TestCase):

    def test_direct_construction_is_validated(self):
        with self.assertRaises(ConfigError):
            GeneratorConfig(api_key="key", max_tries=0)
        with self.assertRaises(ConfigError):
            GeneratorConfig(api_key="key", model="")

    def test_frozen(self):
        config = GeneratorConfig(api_key="key")
        with self.assertRaises(Exception):
            config.max_tries = 10


class TestDailyDir(unittest.TestCase):

    def test_default_and_override(self):
        self.assertEqual(daily_dir_from_env({}), "daily")
        self.assertEqual(daily_dir_from_env({"CONSTRAINT_DAILY_DIR": "/tmp/d"}), "/tmp/d")


if __name__ == "__main__":
    unittest.main()
