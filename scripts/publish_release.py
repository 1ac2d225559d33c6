#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from devx.console import Output  # noqa: E402
from devx.errors import DevxError  # noqa: E402
from devx.release.github import GitHubReleases, repository_from_env, token_from_env  # noqa: E402
from devx.release.publish import check_release, publish_release  # noqa: E402


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Publish release binaries to the GitHub Release for a tag")
    ap.add_argument("--tag", default=os.environ.get("GITHUB_REF_NAME", ""), help="release tag (default: GITHUB_REF_NAME)")
    ap.add_argument("--repository", default=None, help="owner/repo (default: GITHUB_REPOSITORY)")
    ap.add_argument("--files", nargs="*", default=[], help="files to upload")
    ap.add_argument("--check", action="store_true", help="only report which expected binaries are missing")
    ap.add_argument("--binary-name", default="devx")
    args = ap.parse_args(argv)

    repo = args.repository or repository_from_env()
    if not repo:
        print("[DEVX_RELEASE][FAIL] repository not set (use --repository or GITHUB_REPOSITORY)", file=sys.stderr)
        return 2

    out = Output()
    client = GitHubReleases(repo, token=token_from_env())
    try:
        if args.check:
            res = check_release(client, args.tag, binary=args.binary_name)
            if not res.ok:
                print(f"[DEVX_RELEASE][FAIL] {res.tag} is missing: {res.missing}", file=sys.stderr)
                return 2
            print(f"[DEVX_RELEASE][OK] {res.tag} has {res.present}")
            return 0

        uploaded = publish_release(client, args.tag, [Path(f) for f in args.files], out=out)
    except DevxError as e:
        print(f"[DEVX_RELEASE][FAIL] {e}", file=sys.stderr)
        return 2

    print(f"[DEVX_RELEASE][OK] uploaded {len(uploaded)} asset(s) to {args.tag}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
