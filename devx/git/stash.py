from __future__ import annotations

from ..console import Output
from .runner import GitRunner


def stash_local_changes(git: GitRunner, out: Output) -> bool:
    """Stash uncommitted changes (untracked files included). Returns True if anything was stashed."""
    out.heading("checking local branch status")
    status = git.run(["status", "--porcelain"], "failed to get git status", capture=True)
    if not status.stdout.strip():
        return False

    out.item("local changes found. stashing local changes")
    git.run(["add", "."], "failed to stage local changes", capture=False)
    git.run(["stash"], "failed to stash local changes", capture=False)
    return True


def restore_local_changes(git: GitRunner, out: Output) -> None:
    out.heading("restoring stashed changes")
    git.run(["stash", "pop"], "failed to restore local changes", capture=False)
    git.run(["stash", "clear"], "failed to clear stash", capture=False)

    out.heading("unstaging local changes.")
    git.run(["reset"], "failed to unstage local changes", capture=False)
