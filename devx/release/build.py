from __future__ import annotations

import shutil
import tempfile
import zipapp
from dataclasses import dataclass
from pathlib import Path

from ..errors import NotFoundError, ValidationError
from ..utils.fs import make_executable
from ..utils.hashing import sha256_file
from .targets import artifact_name, validate_target

INTERPRETER = "/usr/bin/env python3"
BOOTSTRAP = "import sys\n\nfrom devx.cli import main\n\nsys.exit(main())\n"
PACKAGE = "devx"


@dataclass(frozen=True)
class BuiltBinary:
    target: str
    path: Path
    sha256: str
    bytes_size: int


def release_dir(out_root: Path, target: str) -> Path:
    return Path(out_root) / validate_target(target) / "release"


def _ignore(_dir: str, names):
    return [n for n in names if n == "__pycache__" or n.endswith((".pyc", ".pyo"))]


def build_binary(*, source_root: Path, out_root: Path, target: str, binary_name: str = "devx") -> BuiltBinary:
    """Build the executable archive for a target at ``<out_root>/<target>/release/<binary>``.

    The archive is a zipapp of the ``devx`` package; third-party dependencies
    are resolved from the interpreter that runs it.
    """
    pkg_dir = Path(source_root) / PACKAGE
    if not (pkg_dir / "__init__.py").exists():
        raise NotFoundError(f"package source not found: {pkg_dir}")
    if not binary_name or "/" in binary_name:
        raise ValidationError(f"invalid binary name: {binary_name!r}")

    dest_dir = release_dir(out_root, target)
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / binary_name

    staging = Path(tempfile.mkdtemp(prefix="devx_build_"))
    try:
        shutil.copytree(pkg_dir, staging / PACKAGE, ignore=_ignore)
        (staging / "__main__.py").write_text(BOOTSTRAP, encoding="utf-8")
        zipapp.create_archive(staging, target=dest, interpreter=INTERPRETER, compressed=True)
    finally:
        shutil.rmtree(staging, ignore_errors=True)

    make_executable(dest)
    return BuiltBinary(target=target, path=dest, sha256=sha256_file(dest), bytes_size=int(dest.stat().st_size))


def rename_artifact(path: Path, target: str) -> Path:
    """Rename a built binary in place to ``<binary>-<target>``."""
    src = Path(path)
    if not src.is_file():
        raise NotFoundError(f"built binary not found: {src}")
    dest = src.with_name(artifact_name(src.name, target))
    src.replace(dest)
    return dest
