#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from devx.config import load_settings  # noqa: E402
from devx.console import Output  # noqa: E402
from devx.errors import DevxError  # noqa: E402
from devx.release.verify import verify_installation  # noqa: E402


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Install devx from the remote script, smoke test it, then uninstall")
    ap.add_argument("--script-url", default=None)
    ap.add_argument("--binary-name", default=None)
    args = ap.parse_args(argv)

    try:
        settings = load_settings()
        url = args.script_url or settings.install_script_url
        binary = args.binary_name or settings.binary_name
        res = verify_installation(url, binary=binary, out=Output())
    except DevxError as e:
        print(f"[DEVX_VERIFY][FAIL] {e}", file=sys.stderr)
        return 2

    print(f"[DEVX_VERIFY][OK] {len(res.steps)} step(s) passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
