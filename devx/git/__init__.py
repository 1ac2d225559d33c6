from .commands import delete_branch, switch_branch, sync
from .runner import GitResult, GitRunner, SubprocessGitRunner

__all__ = [
    "GitResult",
    "GitRunner",
    "SubprocessGitRunner",
    "delete_branch",
    "switch_branch",
    "sync",
]
