import os
import unittest
from unittest import mock

from ccpick import config


class ConfigHelperTests(unittest.TestCase):
    def test_env_bool(self) -> None:
        with mock.patch.dict(os.environ, {"CCPICK_TEST_FLAG": " Yes "}):
            self.assertTrue(config._env_bool("CCPICK_TEST_FLAG"))
        with mock.patch.dict(os.environ, {"CCPICK_TEST_FLAG": "0"}):
            self.assertFalse(config._env_bool("CCPICK_TEST_FLAG", True))
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertTrue(config._env_bool("CCPICK_TEST_FLAG", True))

    def test_env_choice_falls_back_on_unknown_value(self) -> None:
        with mock.patch.dict(os.environ, {"CCPICK_TEST_THEME": "DARK"}):
            self.assertEqual(config._env_choice("CCPICK_TEST_THEME", config.THEMES, "light"), "dark")
        with mock.patch.dict(os.environ, {"CCPICK_TEST_THEME": "sepia"}):
            self.assertEqual(config._env_choice("CCPICK_TEST_THEME", config.THEMES, "light"), "light")


if __name__ == "__main__":
    unittest.main()
