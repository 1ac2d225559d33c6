from __future__ import annotations

import fnmatch
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from ..console import Output, get_output
from ..errors import NotFoundError, ValidationError
from .github import GitHubReleases
from .targets import TARGETS, artifact_name

RELEASE_TAG_PATTERN = "v*"


@dataclass(frozen=True)
class ReleaseCheck:
    tag: str
    present: List[str]
    missing: List[str]

    @property
    def ok(self) -> bool:
        return not self.missing


def validate_tag(tag: str) -> str:
    t = str(tag or "").strip()
    if t.startswith("refs/tags/"):
        t = t[len("refs/tags/"):]
    if not t or not fnmatch.fnmatchcase(t, RELEASE_TAG_PATTERN):
        raise ValidationError(f"release tags must match {RELEASE_TAG_PATTERN!r}, got {tag!r}")
    return t


def expected_assets(binary: str = "devx") -> List[str]:
    return [artifact_name(binary, t) for t in TARGETS]


def publish_release(
    client: GitHubReleases,
    tag: str,
    files: Iterable[Path],
    out: Optional[Output] = None,
) -> List[str]:
    """Attach files to the release for ``tag``, creating the release if needed."""
    out = out if out is not None else get_output()
    t = validate_tag(tag)
    paths = [Path(f) for f in files]
    for p in paths:
        if not p.is_file():
            raise NotFoundError(f"release file not found: {p}")

    release = client.ensure_release(t)
    uploaded: List[str] = []
    for p in paths:
        client.upload_asset(release, p, clobber=True)
        out.item("uploaded", p.name)
        uploaded.append(p.name)
    return uploaded


def check_release(client: GitHubReleases, tag: str, binary: str = "devx") -> ReleaseCheck:
    t = validate_tag(tag)
    release = client.get_release(t)
    if release is None:
        raise NotFoundError(f"release not found: {t}")
    names = {str(a.get("name")) for a in client.list_assets(release)}
    want = expected_assets(binary)
    return ReleaseCheck(
        tag=t,
        present=[n for n in want if n in names],
        missing=[n for n in want if n not in names],
    )
