from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import Settings, load_settings
from .console import Output, set_output
from .errors import DevxError
from .git import delete_branch, switch_branch, sync
from .manage import uninstall, update


def _settings(args: argparse.Namespace) -> Settings:
    return args.settings


def cmd_help(args: argparse.Namespace) -> int:
    parser: argparse.ArgumentParser = args.parser
    topic = list(args.topic or [])
    if not topic:
        parser.print_help()
        return 0
    sub = args.subparsers
    for name in topic:
        if sub is None or name not in sub.choices:
            args.out.error(f"unknown command: {' '.join(topic)}")
            return 2
        found = sub.choices[name]
        sub = getattr(found, "_devx_subparsers", None)
    found.print_help()
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    args.out.line(f"devx {__version__}")
    return 0


def cmd_git_sync(args: argparse.Namespace) -> int:
    sync(out=args.out)
    return 0


def cmd_git_switch(args: argparse.Namespace) -> int:
    switch_branch(out=args.out, default_branch=_settings(args).default_branch)
    return 0


def cmd_git_delete(args: argparse.Namespace) -> int:
    delete_branch(out=args.out, default_branch=_settings(args).default_branch)
    return 0


def cmd_manage_uninstall(args: argparse.Namespace) -> int:
    uninstall(_settings(args), out=args.out, purge=bool(args.purge))
    return 0


def cmd_manage_update(args: argparse.Namespace) -> int:
    update(_settings(args), out=args.out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="devx", description="developer workflow helpers")
    p.add_argument("--config", default=None, help="path to config.yml (default: DEVX_CONFIG or ~/.config/devx/config.yml)")
    p.add_argument("--verbose", action="store_true", help="echo external commands before running them")
    sub = p.add_subparsers(dest="cmd", metavar="<command>")
    p._devx_subparsers = sub  # type: ignore[attr-defined]

    sp = sub.add_parser("help", help="show help for devx or one of its commands")
    sp.add_argument("topic", nargs="*", help="command to describe, e.g. 'git sync'")
    sp.set_defaults(func=cmd_help)

    sp = sub.add_parser("version", help="print the devx version")
    sp.set_defaults(func=cmd_version)

    git = sub.add_parser("git", help="git housekeeping")
    git_sub = git.add_subparsers(dest="git_cmd", metavar="<subcommand>", required=True)
    git._devx_subparsers = git_sub  # type: ignore[attr-defined]

    sp = git_sub.add_parser("sync", help="sync latest changes from remote")
    sp.set_defaults(func=cmd_git_sync)

    sp = git_sub.add_parser("switch", help="switch local branch")
    sp.set_defaults(func=cmd_git_switch)

    sp = git_sub.add_parser("delete", help="delete a local branch")
    sp.set_defaults(func=cmd_git_delete)

    manage = sub.add_parser("manage", help="manage the devx installation")
    manage_sub = manage.add_subparsers(dest="manage_cmd", metavar="<subcommand>", required=True)
    manage._devx_subparsers = manage_sub  # type: ignore[attr-defined]

    sp = manage_sub.add_parser("uninstall", help="remove the installed devx binary")
    sp.add_argument("--purge", action="store_true", help="also remove the devx config directory")
    sp.set_defaults(func=cmd_manage_uninstall)

    sp = manage_sub.add_parser("update", help="install the latest released devx binary")
    sp.set_defaults(func=cmd_manage_update)

    return p


def main(argv: Optional[List[str]] = None, out: Optional[Output] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    func = getattr(args, "func", None)

    try:
        settings = load_settings(args.config)
    except DevxError as e:
        # help and version stay usable with a broken config.
        if func not in (None, cmd_help, cmd_version):
            err = out if out is not None else Output()
            err.error(str(e))
            return 1
        settings = Settings()

    if out is None:
        out = Output(color=settings.color, verbose=bool(args.verbose))
    else:
        out.verbose = out.verbose or bool(args.verbose)
    set_output(out)

    args.parser = parser
    args.subparsers = getattr(parser, "_devx_subparsers", None)
    args.settings = settings
    args.out = out

    if func is None:
        parser.print_help()
        return 0

    try:
        return int(func(args) or 0)
    except DevxError as e:
        out.error(str(e))
        return 1
    except KeyboardInterrupt:
        out.error("interrupted")
        return 130


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
