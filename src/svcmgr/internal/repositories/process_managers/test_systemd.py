import dataclasses
import os
import pathlib
import tempfile
import unittest
from unittest import mock

from svcmgr.internal import entities

from .systemd import SystemdProcessManager
from .test_local import RecordingRegistrar


def _fake_systemctl(returncode: int = 0, stderr: bytes = b"") -> mock.AsyncMock:
    proc = mock.Mock()
    proc.returncode = returncode
    proc.communicate = mock.AsyncMock(return_value=(b"", stderr))
    return mock.AsyncMock(return_value=proc)


class TestSystemdProcessManager(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.target = entities.RunTarget(
            name="blog",
            cwd=pathlib.Path("/srv/blog"),
            command=("/usr/bin/node", "current/index.js"),
            environment="production",
        )
        self.registrar = RecordingRegistrar()
        with mock.patch.dict(os.environ, {"SVCMGR_SYSTEMD_UNIT_DIR": self.tmpdir.name}):
            self.pm = SystemdProcessManager(self.registrar)
            self.pm.name = "systemd"
            self.pm.init()

    def test_init(self) -> None:
        self.assertEqual(self.pm.unit_dir, pathlib.Path(self.tmpdir.name))
        self.assertListEqual(
            self.registrar.hooks,
            [("setup", "systemd"), ("uninstall", "systemd")],
        )

    def test_canRun(self) -> None:
        tests = [
            ("systemd host", "/usr/bin/systemctl", True, True),
            ("no systemctl", None, True, False),
            ("not booted with systemd", "/usr/bin/systemctl", False, False),
        ]

        for name, which, is_dir, expected in tests:
            with self.subTest(name=name):
                with (
                    mock.patch("shutil.which", return_value=which),
                    mock.patch("pathlib.Path.is_dir", return_value=is_dir),
                ):
                    self.assertEqual(SystemdProcessManager.can_run(), expected)

    def test_renderUnit(self) -> None:
        unit = SystemdProcessManager.render_unit(self.target)

        self.assertIn('Environment="SVCMGR_ENV=production"\n', unit)
        self.assertIn("ExecStart=/usr/bin/node current/index.js\n", unit)

        with self.assertRaises(ValueError):
            SystemdProcessManager.render_unit(entities.RunTarget(name="x", cwd=pathlib.Path("/")))

    def test_renderUnitQuotesEnvironment(self) -> None:
        tests = [
            ("spaces", "staging eu", 'Environment="SVCMGR_ENV=staging eu"\n'),
            ("quotes", 'say "hi"', 'Environment="SVCMGR_ENV=say \\"hi\\""\n'),
            ("specifiers", "100%", 'Environment="SVCMGR_ENV=100%%"\n'),
        ]

        for name, environment, expected in tests:
            with self.subTest(name=name):
                target = dataclasses.replace(self.target, environment=environment)
                self.assertIn(expected, SystemdProcessManager.render_unit(target))

    async def test_lifecycle(self) -> None:
        tests = [
            (self.pm.start, ["start", "svcmgr-blog"]),
            (self.pm.stop, ["stop", "svcmgr-blog"]),
            (self.pm.restart, ["restart", "svcmgr-blog"]),
        ]

        for method, expected in tests:
            with self.subTest(method=method.__name__):
                exec_mock = _fake_systemctl()
                with mock.patch("asyncio.create_subprocess_exec", exec_mock):
                    await method(self.target)
                self.assertListEqual(list(exec_mock.call_args.args), ["systemctl", *expected])

    async def test_isRunning(self) -> None:
        for returncode, expected in [(0, True), (3, False)]:
            with self.subTest(returncode=returncode):
                with mock.patch("asyncio.create_subprocess_exec", _fake_systemctl(returncode)):
                    self.assertEqual(await self.pm.is_running(self.target), expected)

    async def test_failingSystemctl(self) -> None:
        with mock.patch(
            "asyncio.create_subprocess_exec",
            _fake_systemctl(5, b"Unit svcmgr-blog.service not found."),
        ):
            with self.assertRaisesRegex(OSError, "not found"):
                await self.pm.start(self.target)

    async def test_installAndRemoveUnit(self) -> None:
        exec_mock = _fake_systemctl()
        unit_path = pathlib.Path(self.tmpdir.name) / "svcmgr-blog.service"

        with mock.patch("asyncio.create_subprocess_exec", exec_mock):
            await self.pm.install_unit(self.target)
            self.assertTrue(unit_path.exists())

            await self.pm.remove_unit(self.target)
            self.assertFalse(unit_path.exists())

        self.assertListEqual(
            [list(c.args[1:]) for c in exec_mock.call_args_list],
            [["daemon-reload"], ["disable", "--now", "svcmgr-blog"], ["daemon-reload"]],
        )


if __name__ == "__main__":
    unittest.main()
