from __future__ import annotations

import platform
from typing import Optional, Tuple

from ..errors import ValidationError


LINUX_MUSL = "x86_64-unknown-linux-musl"
APPLE_DARWIN = "x86_64-apple-darwin"

# Release matrix, in the order the build job declares it.
TARGETS: Tuple[str, ...] = (LINUX_MUSL, APPLE_DARWIN)

RUNNER_LINUX = "ubuntu-latest"
RUNNER_MACOS = "macos-latest"


def validate_target(target: str) -> str:
    t = str(target or "").strip()
    if t not in TARGETS:
        raise ValidationError(f"unknown target {target!r}; expected one of {list(TARGETS)}")
    return t


def runner_for(target: str) -> str:
    """CI runner image a target is built on."""
    t = validate_target(target)
    if t.endswith("-apple-darwin"):
        return RUNNER_MACOS
    return RUNNER_LINUX


def artifact_name(binary: str, target: str) -> str:
    """Release asset name: ``<binary>-<target>``."""
    b = str(binary or "").strip()
    if not b or "/" in b:
        raise ValidationError(f"invalid binary name: {binary!r}")
    return f"{b}-{validate_target(target)}"


def host_target(system: Optional[str] = None, machine: Optional[str] = None) -> str:
    """Release target whose binary runs on this host.

    macOS on arm64 uses the x86_64 build.
    """
    sysname = (system if system is not None else platform.system()).strip()
    arch = (machine if machine is not None else platform.machine()).strip().lower()

    if sysname == "Linux" and arch in ("x86_64", "amd64"):
        return LINUX_MUSL
    if sysname == "Darwin" and arch in ("x86_64", "amd64", "arm64", "aarch64"):
        return APPLE_DARWIN
    raise ValidationError(f"no release binary for host {sysname}/{arch}")
