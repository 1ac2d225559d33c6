from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

import requests

from .. import __version__
from ..console import Output, get_output
from ..errors import CommandError, ValidationError

TIMEOUT = 30


@dataclass
class StepResult:
    name: str
    argv: List[str]
    returncode: int


@dataclass
class VerifyResult:
    steps: List[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.steps) and all(s.returncode == 0 for s in self.steps)


Runner = Callable[[Sequence[str], Optional[str]], int]


def _run(argv: Sequence[str], stdin: Optional[str] = None) -> int:
    cp = subprocess.run(list(argv), input=stdin, text=True, check=False)
    return cp.returncode


def fetch_install_script(url: str, session: Optional[requests.Session] = None) -> str:
    if not str(url).startswith("https://"):
        raise ValidationError(f"install script must be fetched over https: {url!r}")
    s = session if session is not None else requests.Session()
    r = s.get(url, headers={"User-Agent": f"devx/{__version__}"}, timeout=TIMEOUT)
    if r.status_code != 200:
        raise CommandError(f"failed to download install script: {r.status_code}: {url}")
    return r.text


def verify_installation(
    script_url: str,
    binary: str = "devx",
    session: Optional[requests.Session] = None,
    runner: Optional[Runner] = None,
    out: Optional[Output] = None,
) -> VerifyResult:
    """Install via the remote script, smoke-test ``help``, then uninstall.

    Stops at the first step that exits non-zero.
    """
    out = out if out is not None else get_output()
    run = runner if runner is not None else _run
    script = fetch_install_script(script_url, session=session)

    steps = [
        ("install binary", ["bash"], script),
        ("verify installation", [binary, "help"], None),
        ("cleanup", [binary, "manage", "uninstall"], None),
    ]

    result = VerifyResult()
    for name, argv, stdin in steps:
        out.heading(name)
        out.command(argv)
        try:
            code = run(argv, stdin)
        except OSError as e:
            raise CommandError(f"{name} failed: {e}") from e
        result.steps.append(StepResult(name=name, argv=list(argv), returncode=code))
        if code != 0:
            raise CommandError(f"{name} failed: {' '.join(argv)} exited with status {code}")
    return result
