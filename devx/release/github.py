from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from .. import __version__
from ..errors import NotFoundError, ReleaseError, ValidationError

API_BASE = "https://api.github.com"
UPLOAD_BASE = "https://uploads.github.com"
TIMEOUT = 30


def token_from_env() -> str:
    return str(os.environ.get("GITHUB_TOKEN", "") or os.environ.get("GH_TOKEN", "") or "").strip()


def repository_from_env() -> Optional[str]:
    repo = str(os.environ.get("GITHUB_REPOSITORY", "") or "").strip()
    if repo and "/" in repo:
        return repo
    return None


def _headers(token: str) -> Dict[str, str]:
    h = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": f"devx/{__version__}",
    }
    if token:
        h["Authorization"] = f"Bearer {token}"
    return h


def _fail(what: str, r: requests.Response) -> ReleaseError:
    return ReleaseError(f"GitHub API error {what}: {r.status_code}: {r.text[:2000]}")


class GitHubReleases:
    """Minimal GitHub Releases client for one repository."""

    def __init__(self, repository: str, token: str = "", session: Optional[requests.Session] = None):
        if not repository or "/" not in repository:
            raise ValidationError("repository must be like 'owner/repo'")
        self.repository = repository
        self.token = token
        self.session = session if session is not None else requests.Session()

    @property
    def _base(self) -> str:
        return f"{API_BASE}/repos/{self.repository}"

    def _require_token(self) -> None:
        if not self.token:
            raise ValidationError("missing GitHub token in GITHUB_TOKEN (or GH_TOKEN); required for publishing releases")

    def get_release(self, tag: str) -> Optional[Dict[str, Any]]:
        r = self.session.get(f"{self._base}/releases/tags/{tag}", headers=_headers(self.token), timeout=TIMEOUT)
        if r.status_code == 404:
            return None
        if r.status_code != 200:
            raise _fail(f"fetching release {tag}", r)
        return r.json()

    def latest_release(self) -> Dict[str, Any]:
        r = self.session.get(f"{self._base}/releases/latest", headers=_headers(self.token), timeout=TIMEOUT)
        if r.status_code == 404:
            raise NotFoundError(f"no published release for {self.repository}")
        if r.status_code != 200:
            raise _fail("fetching latest release", r)
        return r.json()

    def ensure_release(self, tag: str, name: Optional[str] = None) -> Dict[str, Any]:
        """Get the release for a tag, creating it if it does not exist yet."""
        existing = self.get_release(tag)
        if existing is not None:
            return existing

        self._require_token()
        payload = {
            "tag_name": tag,
            "name": name or tag,
            "draft": False,
            "prerelease": False,
            "generate_release_notes": True,
        }
        r = self.session.post(f"{self._base}/releases", headers=_headers(self.token), json=payload, timeout=TIMEOUT)
        if r.status_code == 201:
            return r.json()

        # Sibling matrix jobs publish to the same tag; one of them wins the create.
        existing = self.get_release(tag)
        if existing is not None:
            return existing
        raise _fail(f"creating release {tag}", r)

    def list_assets(self, release: Dict[str, Any]) -> List[Dict[str, Any]]:
        release_id = release.get("id")
        r = self.session.get(
            f"{self._base}/releases/{release_id}/assets",
            headers=_headers(self.token),
            params={"per_page": 100},
            timeout=TIMEOUT,
        )
        if r.status_code != 200:
            raise _fail("listing release assets", r)
        return list(r.json() or [])

    def delete_asset(self, asset_id: Any) -> None:
        self._require_token()
        r = self.session.delete(f"{self._base}/releases/assets/{asset_id}", headers=_headers(self.token), timeout=TIMEOUT)
        if r.status_code not in (204, 404):
            raise _fail(f"deleting asset {asset_id}", r)

    def upload_asset(self, release: Dict[str, Any], path: Path, clobber: bool = True) -> Dict[str, Any]:
        """Upload a file as a release asset. With clobber, a same-named asset is replaced."""
        self._require_token()
        p = Path(path)
        if not p.is_file():
            raise NotFoundError(f"asset file not found: {p}")

        if clobber:
            for a in self.list_assets(release):
                if str(a.get("name")) == p.name:
                    self.delete_asset(a.get("id"))

        headers = _headers(self.token)
        headers["Content-Type"] = "application/octet-stream"
        with p.open("rb") as f:
            r = self.session.post(
                f"{UPLOAD_BASE}/repos/{self.repository}/releases/{release.get('id')}/assets",
                headers=headers,
                params={"name": p.name},
                data=f,
                timeout=TIMEOUT * 10,
            )
        if r.status_code != 201:
            raise _fail(f"uploading asset {p.name}", r)
        return r.json()

    def download_asset(self, asset: Dict[str, Any]) -> bytes:
        url = str(asset.get("browser_download_url") or "").strip()
        if not url:
            raise NotFoundError(f"asset has no download url: {asset.get('name')}")
        r = self.session.get(url, headers={"User-Agent": f"devx/{__version__}"}, timeout=TIMEOUT * 10)
        if r.status_code != 200:
            raise _fail(f"downloading asset {asset.get('name')}", r)
        return r.content
