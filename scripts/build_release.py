#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path so the local 'devx' package is importable without installation
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from devx.console import Output  # noqa: E402
from devx.errors import DevxError  # noqa: E402
from devx.release.build import build_binary, rename_artifact  # noqa: E402
from devx.release.matrix import run_matrix  # noqa: E402
from devx.release.targets import TARGETS  # noqa: E402


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Build release binaries and rename them per target")
    ap.add_argument("--target", action="append", choices=list(TARGETS), help="target triple (repeatable; default: all)")
    ap.add_argument("--out-dir", default="dist")
    ap.add_argument("--binary-name", default="devx")
    ap.add_argument("--fail-fast", action="store_true")
    args = ap.parse_args(argv)

    out = Output()
    out_root = Path(args.out_dir).resolve()
    targets = args.target or list(TARGETS)

    def job(target: str) -> None:
        built = build_binary(source_root=REPO_ROOT, out_root=out_root, target=target, binary_name=args.binary_name)
        final = rename_artifact(built.path, target)
        out.item(f"built {final.relative_to(out_root)}", built.sha256)

    try:
        run = run_matrix(targets, job, fail_fast=bool(args.fail_fast), out=out)
    except DevxError as e:
        print(f"[DEVX_BUILD][FAIL] {e}", file=sys.stderr)
        return 2

    if not run.ok:
        failed = [r.target for r in run.results if r.status != "success"]
        print(f"[DEVX_BUILD][FAIL] targets not built: {failed}", file=sys.stderr)
        return 2
    print(f"[DEVX_BUILD][OK] built {len(run.results)} target(s) into {out_root}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
