from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class BranchList:
    current: str
    others: List[str] = field(default_factory=list)


def parse_branch_list(output: str, default: str = "main") -> BranchList:
    """Parse ``git --no-pager branch --no-color`` output.

    The line marked with ``*`` is the current branch (a detached HEAD shows up
    as ``(HEAD detached at ...)``). When no line is marked, ``default`` is
    reported as current. Branches checked out in another worktree carry a
    ``+`` marker, which is stripped.
    """
    current = ""
    others: List[str] = []
    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith("*"):
            current = line.lstrip("*").strip()
            continue
        if line.startswith("+"):
            line = line.lstrip("+").strip()
        others.append(line)
    return BranchList(current=current or default, others=others)
