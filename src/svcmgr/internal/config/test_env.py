"""Tests for the config module."""

import unittest.mock

from .env import EnvParser, ManagerEnv


class TestConfig(EnvParser):
    """Test config class."""

    REQUIRED_STR: str
    REQUIRED_BOOL: bool
    REQUIRED_INT: int
    OPTIONAL_STR: str = "default"
    OPTIONAL_BOOL: bool = True
    OPTIONAL_INT: int = 4


class Test_EnvParser(unittest.TestCase):
    """Tests for the EnvParser class."""

    @unittest.mock.patch.dict(
        "os.environ",
        {
            "REQUIRED_STR": "required_str",
            "REQUIRED_BOOL": "false",
            "REQUIRED_INT": "5",
        },
    )
    def test_parsesEnvVars(self) -> None:
        tc = TestConfig()

        self.assertEqual("required_str", tc.REQUIRED_STR)
        self.assertFalse(tc.REQUIRED_BOOL)
        self.assertEqual(5, tc.REQUIRED_INT)
        self.assertEqual("default", tc.OPTIONAL_STR)
        self.assertTrue(tc.OPTIONAL_BOOL)
        self.assertEqual(4, tc.OPTIONAL_INT)

    @unittest.mock.patch.dict(
        "os.environ",
        {
            "REQUIRED_STR": "required_str",
            "REQUIRED_BOOL": "not a bool",
            "REQUIRED_INT": "5.7",
        },
    )
    def test_errorsIfCantCastType(self) -> None:
        with self.assertRaises(ValueError):
            TestConfig()

    @unittest.mock.patch.dict("os.environ", {}, clear=True)
    def test_errorsIfRequiredFieldNotSet(self) -> None:
        with self.assertRaises(OSError):
            TestConfig()

    @unittest.mock.patch.dict("os.environ", {}, clear=True)
    def test_managerEnvDefaults(self) -> None:
        env = ManagerEnv()

        self.assertEqual(env.SVCMGR_CONFIG, ".svcmgr.json")
        self.assertEqual(env.SVCMGR_PROCESS, "systemd")

    @unittest.mock.patch.dict(
        "os.environ", {"SVCMGR_CONFIG": "/srv/blog/.svcmgr.json", "SVCMGR_PROCESS": "local"},
    )
    def test_managerEnvFromEnvironment(self) -> None:
        env = ManagerEnv()

        self.assertEqual(env.SVCMGR_CONFIG, "/srv/blog/.svcmgr.json")
        self.assertEqual(env.SVCMGR_PROCESS, "local")


if __name__ == "__main__":
    unittest.main()
