from __future__ import annotations

import shutil
from typing import Optional

from .. import __version__
from ..config import Settings, default_config_path
from ..console import Output, get_output
from ..errors import NotFoundError, ValidationError
from ..release.github import GitHubReleases, token_from_env
from ..release.targets import artifact_name, host_target
from ..utils.fs import atomic_write_bytes


def uninstall(settings: Settings, out: Optional[Output] = None, purge: bool = False) -> None:
    """Remove the installed binary (and with purge, the devx config)."""
    out = out if out is not None else get_output()
    path = settings.install_path

    if path.is_dir() and not path.is_symlink():
        raise ValidationError(f"{path} is a directory, not a {settings.binary_name} binary. refusing to remove it")
    if path.exists() or path.is_symlink():
        path.unlink()
        out.line(f"removed {path}")
    else:
        out.line(f"{settings.binary_name} is not installed at {path}. nothing to uninstall")

    if purge:
        _purge_config(settings, out)

    out.heading(f"{settings.binary_name} uninstalled ^.^")


def _purge_config(settings: Settings, out: Output) -> None:
    # Only the devx-owned default directory is removed wholesale; a config
    # file elsewhere is removed on its own.
    owned = default_config_path().parent
    cfg = settings.config_path
    if cfg is not None and cfg.is_file() and settings.config_dir != owned:
        cfg.unlink()
        out.line(f"removed {cfg}")
    if owned.is_dir():
        shutil.rmtree(owned)
        out.line(f"removed {owned}")


def update(
    settings: Settings,
    client: Optional[GitHubReleases] = None,
    out: Optional[Output] = None,
    current_version: str = __version__,
    target: Optional[str] = None,
) -> bool:
    """Replace the installed binary with the latest release asset for this host.

    Returns True when a new binary was written.
    """
    out = out if out is not None else get_output()
    client = client if client is not None else GitHubReleases(settings.repository, token=token_from_env())
    want_target = target if target is not None else host_target()
    name = artifact_name(settings.binary_name, want_target)

    out.heading("checking for updates")
    release = client.latest_release()
    tag = str(release.get("tag_name") or "").strip()
    if tag.lstrip("v") == str(current_version).lstrip("v"):
        out.line(f"{settings.binary_name} is up to date ({tag})")
        return False

    asset = next((a for a in release.get("assets") or [] if str(a.get("name")) == name), None)
    if asset is None:
        raise NotFoundError(f"release {tag} has no asset {name}")

    out.item("downloading", name)
    data = client.download_asset(asset)
    atomic_write_bytes(settings.install_path, data, mode=0o755)
    out.heading(f"updated {settings.binary_name} to {tag}")
    return True
