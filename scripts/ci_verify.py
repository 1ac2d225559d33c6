#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List

import yaml

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from devx.release.targets import TARGETS, runner_for  # noqa: E402

CI_CONCURRENCY_GROUP = "${{ github.workflow }}-${{ github.event.pull_request.number || github.ref }}"
PR_EVENT_TYPES = ["opened", "synchronize", "reopened", "ready_for_review"]


def _die(msg: str) -> None:
    print(f"[DEVX_CI][FAIL] {msg}", file=sys.stderr)
    raise SystemExit(2)


def _ok(msg: str) -> None:
    print(f"[DEVX_CI][OK] {msg}")


def _load_workflow(path: Path) -> Dict[str, Any]:
    if not path.exists():
        _die(f"Missing workflow: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        _die(f"Workflow is not a mapping: {path}")
    return data


def _triggers(wf: Dict[str, Any]) -> Dict[str, Any]:
    # YAML 1.1 reads a bare `on:` key as boolean True.
    on = wf.get("on", wf.get(True))
    if not isinstance(on, dict):
        _die(f"Workflow {wf.get('name')!r} has no trigger mapping")
    return on


def _step_runs(job: Dict[str, Any]) -> List[str]:
    out: List[str] = []
    for step in job.get("steps") or []:
        if isinstance(step, dict) and step.get("run"):
            out.append(str(step["run"]).strip())
    return out


def _verify_ci(repo_root: Path) -> None:
    path = repo_root / ".github" / "workflows" / "ci.yaml"
    wf = _load_workflow(path)

    pr = _triggers(wf).get("pull_request") or {}
    if sorted(pr.get("types") or []) != sorted(PR_EVENT_TYPES):
        _die(f"ci.yaml pull_request types must be {PR_EVENT_TYPES}, got {pr.get('types')}")
    if list(pr.get("branches") or []) != ["main"]:
        _die(f"ci.yaml must target branch main, got {pr.get('branches')}")

    conc = wf.get("concurrency") or {}
    if conc.get("group") != CI_CONCURRENCY_GROUP or conc.get("cancel-in-progress") is not True:
        _die("ci.yaml concurrency must cancel superseded runs of the same pull request")

    if str((wf.get("env") or {}).get("DEVX_COLOR", "")) != "always":
        _die("ci.yaml must set DEVX_COLOR=always")

    check = (wf.get("jobs") or {}).get("check")
    if not isinstance(check, dict):
        _die("ci.yaml missing job: check")
    runs = _step_runs(check)
    for cmd in ("make init", "make ci"):
        if cmd not in runs:
            _die(f"ci.yaml check job must run {cmd!r}")

    _ok("ci.yaml: triggers, concurrency and check job OK")


def _verify_release(repo_root: Path) -> None:
    path = repo_root / ".github" / "workflows" / "release.yaml"
    wf = _load_workflow(path)

    push = _triggers(wf).get("push") or {}
    if list(push.get("tags") or []) != ["v*"]:
        _die(f"release.yaml must trigger on tags ['v*'], got {push.get('tags')}")
    if (wf.get("permissions") or {}).get("contents") != "write":
        _die("release.yaml needs permissions.contents=write to publish")

    jobs = wf.get("jobs") or {}
    build = jobs.get("build")
    if not isinstance(build, dict):
        _die("release.yaml missing job: build")
    strategy = build.get("strategy") or {}
    if strategy.get("fail-fast") is not False:
        _die("release.yaml build matrix must set fail-fast: false")

    matrix = strategy.get("matrix") or {}
    targets = list(matrix.get("target") or [])
    if targets != list(TARGETS):
        _die(f"release.yaml build targets {targets} do not match devx.release.targets.TARGETS {list(TARGETS)}")

    runners = {}
    for inc in matrix.get("include") or []:
        if isinstance(inc, dict) and inc.get("target"):
            runners[str(inc["target"])] = str(inc.get("runner") or "")
    for t in TARGETS:
        if runners.get(t) != runner_for(t):
            _die(f"release.yaml target {t} must run on {runner_for(t)}, got {runners.get(t)!r}")

    verify = jobs.get("verify")
    if not isinstance(verify, dict):
        _die("release.yaml missing job: verify")
    if verify.get("needs") != "build":
        _die("release.yaml verify job must need build")
    oses = list(((verify.get("strategy") or {}).get("matrix") or {}).get("os") or [])
    if sorted(oses) != ["macos-latest", "ubuntu-latest"]:
        _die(f"release.yaml verify matrix must cover ubuntu-latest and macos-latest, got {oses}")
    runs = _step_runs(verify)
    for cmd in ("devx help", "devx manage uninstall"):
        if cmd not in runs:
            _die(f"release.yaml verify job must run {cmd!r}")

    _ok("release.yaml: tag trigger, build matrix and verify job OK")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Check workflow files against the release targets and CI contract")
    ap.add_argument("--repo-root", default=str(REPO_ROOT))
    args = ap.parse_args(argv)

    repo_root = Path(args.repo_root).resolve()
    _verify_ci(repo_root)
    _verify_release(repo_root)

    _ok("workflow verification complete")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
