from __future__ import annotations

import contextlib
import io
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from _testutil import ensure_repo_on_path, quiet_output


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        ensure_repo_on_path()
        self._td = tempfile.TemporaryDirectory()
        self.tmp = Path(self._td.name)
        env = {k: v for k, v in os.environ.items() if not k.startswith("DEVX_")}
        env["XDG_CONFIG_HOME"] = str(self.tmp / "xdg")
        env["DEVX_INSTALL_DIR"] = str(self.tmp / "bin")
        self._env = mock.patch.dict(os.environ, env, clear=True)
        self._env.start()

    def tearDown(self) -> None:
        self._env.stop()
        self._td.cleanup()

    def _main(self, *argv: str):
        from devx.cli import main

        out, buf = quiet_output()
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            code = main(list(argv), out=out)
        return code, stdout.getvalue() + buf.getvalue()

    def test_help_exits_zero_and_lists_commands(self) -> None:
        code, text = self._main("help")
        self.assertEqual(code, 0)
        for word in ("usage: devx", "git", "manage", "help"):
            self.assertIn(word, text)

    def test_no_command_prints_help(self) -> None:
        code, text = self._main()
        self.assertEqual(code, 0)
        self.assertIn("usage: devx", text)

    def test_help_for_nested_command(self) -> None:
        code, text = self._main("help", "git", "sync")
        self.assertEqual(code, 0)
        self.assertIn("usage: devx git sync", text)

        code, text = self._main("help", "manage")
        self.assertEqual(code, 0)
        self.assertIn("uninstall", text)

    def test_help_for_unknown_command(self) -> None:
        code, text = self._main("help", "deploy")
        self.assertEqual(code, 2)
        self.assertIn("unknown command: deploy", text)

    def test_version(self) -> None:
        from devx import __version__

        code, text = self._main("version")
        self.assertEqual(code, 0)
        self.assertIn(f"devx {__version__}", text)

    def test_manage_uninstall_without_install_succeeds(self) -> None:
        code, text = self._main("manage", "uninstall")
        self.assertEqual(code, 0)
        self.assertIn("nothing to uninstall", text)

    def test_manage_uninstall_removes_binary(self) -> None:
        binary = self.tmp / "bin" / "devx"
        binary.parent.mkdir(parents=True)
        binary.write_text("#!/bin/sh\n", encoding="utf-8")

        code, text = self._main("manage", "uninstall")
        self.assertEqual(code, 0)
        self.assertFalse(binary.exists())
        self.assertIn("devx uninstalled ^.^", text)

    def test_devx_errors_exit_one(self) -> None:
        from devx.errors import ToolNotFoundError

        with mock.patch("devx.cli.sync", side_effect=ToolNotFoundError("git not found. install git and try again.")):
            code, text = self._main("git", "sync")
        self.assertEqual(code, 1)
        self.assertIn("error: git not found. install git and try again.", text)

    def test_interrupt_exits_130(self) -> None:
        with mock.patch("devx.cli.sync", side_effect=KeyboardInterrupt):
            code, text = self._main("git", "sync")
        self.assertEqual(code, 130)
        self.assertIn("error: interrupted", text)

    def test_bad_config_exits_one(self) -> None:
        code, text = self._main("--config", str(self.tmp / "nope.yml"), "manage", "uninstall")
        self.assertEqual(code, 1)
        self.assertIn("config file not found", text)

    def test_help_and_version_survive_bad_config(self) -> None:
        bad = self.tmp / "bad.yml"
        bad.write_text("color: sometimes\n", encoding="utf-8")

        for argv in (["help"], ["version"], []):
            with self.subTest(argv=argv):
                code, text = self._main("--config", str(self.tmp / "nope.yml"), *argv)
                self.assertEqual(code, 0)
                self.assertNotIn("error:", text)

                code, _ = self._main("--config", str(bad), *argv)
                self.assertEqual(code, 0)

        with mock.patch.dict(os.environ, {"DEVX_COLOR": "yes"}):
            code, text = self._main("help")
            self.assertEqual(code, 0)
            self.assertIn("usage: devx", text)

            code, text = self._main("git", "sync")
            self.assertEqual(code, 1)
            self.assertIn("DEVX_COLOR must be one of", text)

    def test_usage_errors_exit_two(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                self._main("git", "rebase")
        self.assertEqual(ctx.exception.code, 2)


class TestOutput(unittest.TestCase):
    def test_markup_in_values_is_printed_literally(self) -> None:
        ensure_repo_on_path()
        out, buf = quiet_output()
        out.item("latest commit", "abc [bold]not markup[/bold]")
        self.assertIn("- latest commit: abc [bold]not markup[/bold]", buf.getvalue())

    def test_always_emits_ansi_styles(self) -> None:
        ensure_repo_on_path()
        from devx.console import Output

        buf = io.StringIO()
        Output(color="always", file=buf).heading("git sync complete ^.^")
        self.assertIn("\x1b[1m", buf.getvalue())

    def test_auto_honours_no_color(self) -> None:
        ensure_repo_on_path()
        from devx.console import Output

        with mock.patch.dict(os.environ, {"NO_COLOR": "1"}):
            out = Output(color="auto", file=io.StringIO())
        self.assertTrue(out.console.no_color)
        self.assertTrue(out.err_console.no_color)

        with mock.patch.dict(os.environ, {"NO_COLOR": ""}):
            out = Output(color="auto", file=io.StringIO())
        self.assertFalse(out.console.no_color)


if __name__ == "__main__":
    unittest.main()
