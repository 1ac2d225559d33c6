from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..console import Output, get_output
from ..errors import CommandError, ToolNotFoundError


@dataclass(frozen=True)
class GitResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitRunner:
    """Run git subcommands in one of two modes.

    capture=True collects stdout/stderr and leaves the exit status for the
    caller to inspect. capture=False streams git's output to the terminal and
    raises CommandError when git exits non-zero.
    """

    executable = "git"

    def __init__(self, *, out: Optional[Output] = None):
        self.out = out if out is not None else get_output()

    def ensure_available(self) -> None:
        raise NotImplementedError

    def _invoke(self, argv: List[str], capture: bool) -> GitResult:
        raise NotImplementedError

    def run(self, args: Sequence[str], error_msg: str, capture: bool = True) -> GitResult:
        argv = [self.executable, *[str(a) for a in args]]
        self.out.command(argv)
        try:
            res = self._invoke(argv, capture)
        except OSError as e:
            raise CommandError(f"{error_msg}: {e}") from e
        if not capture and not res.ok:
            raise CommandError(f"{error_msg}: git exited with status {res.returncode}")
        return res


class SubprocessGitRunner(GitRunner):
    def __init__(self, *, cwd: Optional[Path] = None, out: Optional[Output] = None):
        super().__init__(out=out)
        self.cwd = cwd

    def ensure_available(self) -> None:
        if shutil.which(self.executable) is None:
            raise ToolNotFoundError("git not found. install git and try again.")

    def _invoke(self, argv: List[str], capture: bool) -> GitResult:
        cwd = str(self.cwd) if self.cwd is not None else None
        if capture:
            # Callers match on git's English messages.
            env = {**os.environ, "LC_ALL": "C"}
            cp = subprocess.run(argv, cwd=cwd, env=env, check=False, text=True, capture_output=True)
            return GitResult(returncode=cp.returncode, stdout=cp.stdout or "", stderr=cp.stderr or "")
        cp = subprocess.run(argv, cwd=cwd, check=False)
        return GitResult(returncode=cp.returncode)
