from __future__ import annotations

import unittest

from _testutil import ensure_repo_on_path, quiet_output


class FakeResponse:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    def __init__(self, status_code=200, text="#!/usr/bin/env bash\necho installed\n"):
        self.status_code = status_code
        self.text = text
        self.urls = []

    def get(self, url, headers=None, timeout=None):
        self.urls.append(url)
        return FakeResponse(self.status_code, self.text)


class RecordingRunner:
    def __init__(self, codes=None):
        self.codes = dict(codes or {})
        self.calls = []

    def __call__(self, argv, stdin=None):
        self.calls.append((list(argv), stdin))
        return self.codes.get(tuple(argv), 0)


URL = "https://raw.githubusercontent.com/ajndkr/devx/main/install.sh"


class TestVerifyInstallation(unittest.TestCase):
    def setUp(self) -> None:
        ensure_repo_on_path()

    def test_install_smoke_test_and_cleanup(self) -> None:
        from devx.release.verify import verify_installation

        session = FakeSession()
        runner = RecordingRunner()
        out, buf = quiet_output()
        res = verify_installation(URL, session=session, runner=runner, out=out)

        self.assertTrue(res.ok)
        self.assertEqual(session.urls, [URL])
        self.assertEqual(
            runner.calls,
            [
                (["bash"], session.text),
                (["devx", "help"], None),
                (["devx", "manage", "uninstall"], None),
            ],
        )
        self.assertEqual([s.name for s in res.steps], ["install binary", "verify installation", "cleanup"])
        self.assertIn("verify installation", buf.getvalue())

    def test_failed_help_stops_before_cleanup(self) -> None:
        from devx.errors import CommandError
        from devx.release.verify import verify_installation

        runner = RecordingRunner({("devx", "help"): 127})
        out, _ = quiet_output()
        with self.assertRaises(CommandError) as ctx:
            verify_installation(URL, session=FakeSession(), runner=runner, out=out)

        self.assertIn("verify installation failed", str(ctx.exception))
        self.assertIn("127", str(ctx.exception))
        self.assertEqual(len(runner.calls), 2)

    def test_script_must_come_over_https(self) -> None:
        from devx.errors import ValidationError
        from devx.release.verify import verify_installation

        runner = RecordingRunner()
        out, _ = quiet_output()
        with self.assertRaises(ValidationError):
            verify_installation("http://raw.githubusercontent.com/ajndkr/devx/main/install.sh", runner=runner, out=out)
        self.assertEqual(runner.calls, [])

    def test_download_failure(self) -> None:
        from devx.errors import CommandError
        from devx.release.verify import verify_installation

        runner = RecordingRunner()
        out, _ = quiet_output()
        with self.assertRaises(CommandError):
            verify_installation(URL, session=FakeSession(status_code=404), runner=runner, out=out)
        self.assertEqual(runner.calls, [])

    def test_missing_executable(self) -> None:
        from devx.errors import CommandError
        from devx.release.verify import verify_installation

        def runner(argv, stdin=None):
            raise FileNotFoundError(2, "No such file or directory", argv[0])

        out, _ = quiet_output()
        with self.assertRaises(CommandError):
            verify_installation(URL, session=FakeSession(), runner=runner, out=out)


if __name__ == "__main__":
    unittest.main()
