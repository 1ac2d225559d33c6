from __future__ import annotations

import os
import shutil
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from _testutil import ensure_repo_on_path, quiet_output


class TestSubprocessGitRunner(unittest.TestCase):
    def setUp(self) -> None:
        ensure_repo_on_path()

    def _python_runner(self, verbose: bool = False):
        from devx.git.runner import SubprocessGitRunner

        out, buf = quiet_output(verbose=verbose)
        runner = SubprocessGitRunner(out=out)
        # Drive the runner with the interpreter so exit codes are predictable.
        runner.executable = sys.executable
        return runner, buf

    def test_capture_mode_returns_status_and_output(self) -> None:
        runner, _ = self._python_runner()
        res = runner.run(["-c", "import sys; print('hi'); sys.exit(3)"], "boom", capture=True)
        self.assertEqual(res.returncode, 3)
        self.assertFalse(res.ok)
        self.assertEqual(res.stdout.strip(), "hi")

    def test_capture_mode_forces_c_locale(self) -> None:
        runner, _ = self._python_runner()
        with mock.patch.dict(os.environ, {"LANG": "de_DE.UTF-8", "LC_ALL": "de_DE.UTF-8"}):
            res = runner.run(["-c", "import os; print(os.environ.get('LC_ALL'), os.environ.get('LANG'))"], "boom")
        self.assertEqual(res.stdout.split(), ["C", "de_DE.UTF-8"])

    def test_inherit_mode_raises_on_non_zero_exit(self) -> None:
        from devx.errors import CommandError

        runner, _ = self._python_runner()
        with self.assertRaises(CommandError) as ctx:
            runner.run(["-c", "import sys; sys.exit(1)"], "failed to stash local changes", capture=False)
        self.assertIn("failed to stash local changes", str(ctx.exception))

    def test_spawn_failure_is_command_error(self) -> None:
        from devx.errors import CommandError
        from devx.git.runner import SubprocessGitRunner

        out, _ = quiet_output()
        runner = SubprocessGitRunner(out=out)
        runner.executable = "/nonexistent/devx-test-git"
        with self.assertRaises(CommandError) as ctx:
            runner.run(["status"], "failed to get git status")
        self.assertTrue(str(ctx.exception).startswith("failed to get git status: "))

    def test_missing_executable_is_reported(self) -> None:
        from devx.errors import ToolNotFoundError
        from devx.git.runner import SubprocessGitRunner

        out, _ = quiet_output()
        runner = SubprocessGitRunner(out=out)
        runner.executable = "devx-test-no-such-tool"
        with self.assertRaises(ToolNotFoundError) as ctx:
            runner.ensure_available()
        self.assertEqual(str(ctx.exception), "git not found. install git and try again.")

    def test_verbose_echoes_commands(self) -> None:
        runner, buf = self._python_runner(verbose=True)
        runner.run(["-c", "pass"], "boom")
        self.assertIn("$ ", buf.getvalue())
        self.assertIn("-c pass", buf.getvalue())


@unittest.skipUnless(shutil.which("git"), "git not installed")
class TestSyncAgainstRealRepository(unittest.TestCase):
    def _git(self, cwd: Path, *args: str) -> str:
        cp = subprocess.run(["git", *args], cwd=str(cwd), check=True, text=True, capture_output=True)
        return cp.stdout

    def _configure(self, repo: Path) -> None:
        self._git(repo, "config", "user.email", "dev@example.com")
        self._git(repo, "config", "user.name", "dev")

    def test_sync_carries_local_changes_across_rebase(self) -> None:
        ensure_repo_on_path()
        from devx.git.commands import sync
        from devx.git.runner import SubprocessGitRunner

        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            remote = root / "remote.git"
            work = root / "work"
            other = root / "other"

            self._git(root, "init", "-q", "--bare", "-b", "main", str(remote))
            self._git(root, "init", "-q", "-b", "main", str(work))
            self._configure(work)
            (work / "a.txt").write_text("one\n", encoding="utf-8")
            self._git(work, "add", "a.txt")
            self._git(work, "commit", "-qm", "first")
            self._git(work, "remote", "add", "origin", str(remote))
            self._git(work, "push", "-q", "-u", "origin", "main")

            self._git(root, "clone", "-q", str(remote), str(other))
            self._configure(other)
            (other / "b.txt").write_text("two\n", encoding="utf-8")
            self._git(other, "add", "b.txt")
            self._git(other, "commit", "-qm", "second")
            self._git(other, "push", "-q", "origin", "main")

            (work / "a.txt").write_text("one\nlocal edit\n", encoding="utf-8")

            out, buf = quiet_output()
            sync(git=SubprocessGitRunner(cwd=work, out=out), out=out)

            self.assertTrue((work / "b.txt").exists())
            self.assertEqual((work / "a.txt").read_text(encoding="utf-8"), "one\nlocal edit\n")
            self.assertIn("git sync complete ^.^", buf.getvalue())
            self.assertIn("second", buf.getvalue())


if __name__ == "__main__":
    unittest.main()
