from __future__ import annotations

from typing import Optional

from ..config import DEFAULT_BRANCH
from ..console import Output, get_output
from ..errors import CommandError, DevxError
from ..prompt import Prompter, RichPrompter
from .branches import BranchList, parse_branch_list
from .runner import GitRunner, SubprocessGitRunner
from .stash import restore_local_changes, stash_local_changes


def _setup(git: Optional[GitRunner], out: Optional[Output]):
    out = out if out is not None else get_output()
    git = git if git is not None else SubprocessGitRunner(out=out)
    git.ensure_available()
    return git, out


def _in_git_repo(git: GitRunner) -> bool:
    return git.run(["rev-parse", "--git-dir"], "failed to execute git command", capture=True).ok


def _list_branches(git: GitRunner, default_branch: str) -> BranchList:
    res = git.run(["--no-pager", "branch", "--no-color"], "failed to get branch list", capture=True)
    if not res.ok:
        raise CommandError(f"failed to get branch list: {res.stderr.strip()}")
    return parse_branch_list(res.stdout, default=default_branch)


def _note_stash(e: DevxError, stashed: bool) -> DevxError:
    if not stashed:
        return e
    return type(e)(f"{e} (local changes are still stashed; run 'git stash pop' to restore them)")


def sync(git: Optional[GitRunner] = None, out: Optional[Output] = None) -> None:
    """Rebase the current branch onto its upstream, carrying local changes across."""
    git, out = _setup(git, out)

    if not _in_git_repo(git):
        out.line("current directory is not a git repository. nothing to sync.")
        return

    upstream = git.run(
        ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"],
        "failed to get upstream branch",
        capture=True,
    )
    if not upstream.ok:
        out.line("no upstream branch found. nothing to sync")
        return

    stashed = stash_local_changes(git, out)

    try:
        out.heading("syncing changes with upstream branch")
        git.run(["fetch", "-p"], "failed to fetch remote changes", capture=False)
        git.run(["pull", "--rebase"], "failed to pull remote changes", capture=False)

        log = git.run(["log", "-1", "--oneline"], "failed to get latest commit", capture=True)
        out.item("latest commit", log.stdout.strip())
    except DevxError as e:
        raise _note_stash(e, stashed) from e

    if stashed:
        restore_local_changes(git, out)

    out.heading("git sync complete ^.^")


def switch_branch(
    git: Optional[GitRunner] = None,
    out: Optional[Output] = None,
    prompter: Optional[Prompter] = None,
    default_branch: str = DEFAULT_BRANCH,
) -> None:
    git, out = _setup(git, out)
    prompter = prompter if prompter is not None else RichPrompter(out)

    if not _in_git_repo(git):
        out.line("current directory is not a git repository. nothing to switch.")
        return

    branches = _list_branches(git, default_branch)
    out.labelled("current branch", branches.current)

    if not branches.others:
        out.line("no other branches found. nothing to switch")
        return

    new_branch = prompter.select("select new branch:", branches.others)

    stashed = stash_local_changes(git, out)

    try:
        git.run(["checkout", new_branch], "failed to switch branch", capture=False)
    except DevxError as e:
        raise _note_stash(e, stashed) from e

    if stashed:
        restore_local_changes(git, out)

    out.heading("branch switch complete ^.^")


def delete_branch(
    git: Optional[GitRunner] = None,
    out: Optional[Output] = None,
    prompter: Optional[Prompter] = None,
    default_branch: str = DEFAULT_BRANCH,
) -> None:
    """Delete a local branch other than the current and default branches."""
    git, out = _setup(git, out)
    prompter = prompter if prompter is not None else RichPrompter(out)

    if not _in_git_repo(git):
        out.line("current directory is not a git repository. nothing to delete.")
        return

    branches = _list_branches(git, default_branch)
    out.labelled("current branch", branches.current)

    candidates = [b for b in branches.others if b != default_branch]
    if not candidates:
        out.line("no branches available for deletion. nothing to delete")
        return

    target = prompter.select("select branch to delete:", candidates)
    if not prompter.confirm(f"delete branch '{target}'?", default=False):
        out.line("branch deletion cancelled")
        return

    res = git.run(["branch", "-d", target], "failed to delete branch", capture=True)
    if not res.ok:
        if "not fully merged" not in res.stderr:
            raise CommandError(f"failed to delete branch: {res.stderr.strip()}")
        if not prompter.confirm(f"branch '{target}' is not fully merged. force delete?", default=False):
            out.line("branch deletion cancelled")
            return
        git.run(["branch", "-D", target], "failed to force delete branch", capture=False)
    elif res.stdout.strip():
        out.item(res.stdout.strip())

    out.heading("branch delete complete ^.^")
