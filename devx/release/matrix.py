from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from ..console import Output, get_output

SUCCESS = "success"
FAILURE = "failure"
CANCELLED = "cancelled"


@dataclass
class MatrixResult:
    target: str
    status: str
    error: Optional[str] = None


@dataclass
class MatrixRun:
    results: List[MatrixResult]

    @property
    def ok(self) -> bool:
        return all(r.status == SUCCESS for r in self.results)

    def by_target(self) -> Dict[str, MatrixResult]:
        return {r.target: r for r in self.results}


def run_matrix(
    targets: Iterable[str],
    job: Callable[[str], object],
    fail_fast: bool = False,
    out: Optional[Output] = None,
) -> MatrixRun:
    """Run ``job`` once per target.

    With fail_fast=False every target runs regardless of sibling failures.
    With fail_fast=True targets after the first failure are marked cancelled.
    """
    out = out if out is not None else get_output()
    results: List[MatrixResult] = []
    failed = False
    for target in targets:
        if failed and fail_fast:
            results.append(MatrixResult(target=target, status=CANCELLED))
            continue
        try:
            job(target)
        except Exception as e:
            failed = True
            out.item(f"{target}: {FAILURE}", str(e))
            results.append(MatrixResult(target=target, status=FAILURE, error=f"{e.__class__.__name__}: {e}"))
            continue
        out.item(f"{target}: {SUCCESS}")
        results.append(MatrixResult(target=target, status=SUCCESS))
    return MatrixRun(results=results)
