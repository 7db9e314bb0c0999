"""Cargo metadata provider — finds ``build.rs`` scripts in a crate's dependency tree.

Runs ``cargo fetch`` so every dependency's sources are on disk, then reads
``cargo metadata --format-version=1`` and yields each package that has a
``custom-build`` target, in metadata order.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from buildtrust.core.errors import DependencyResolutionError
from buildtrust.models.cargo import CargoMetadata, CargoPackage
from buildtrust.models.packages import BuildHook, PackageIdentity

logger = logging.getLogger(__name__)

Runner = Callable[[list[str]], subprocess.CompletedProcess[str]]


def _run(cmd: list[str]) -> subprocess.CompletedProcess[str]:
    # stderr is inherited so cargo's progress output reaches the operator
    return subprocess.run(cmd, stdout=subprocess.PIPE, text=True)


def find_build_scripts(metadata: CargoMetadata) -> list[CargoPackage]:
    """Return every package with a custom build script."""
    return [pkg for pkg in metadata.packages if pkg.build_script() is not None]


class CargoMetadataProvider:
    """``MetadataProvider`` backed by the ``cargo`` binary.

    Parameters
    ----------
    cargo_bin:
        Name or path of the cargo executable.
    manifest_path:
        ``Cargo.toml`` to resolve; cargo's own discovery is used when ``None``.
    fetch:
        Run ``cargo fetch`` before reading metadata.
    runner:
        Executes a command and returns its completed process. Tests inject
        a fake here.
    """

    def __init__(
        self,
        *,
        cargo_bin: str = "cargo",
        manifest_path: Path | None = None,
        fetch: bool = True,
        runner: Runner | None = None,
    ) -> None:
        self._cargo_bin = cargo_bin
        self._manifest_path = manifest_path
        self._fetch = fetch
        self._runner = runner or _run

    def _command(self, *args: str) -> list[str]:
        cmd = [self._cargo_bin, *args]
        if self._manifest_path is not None:
            cmd += ["--manifest-path", str(self._manifest_path)]
        return cmd

    def _invoke(self, cmd: list[str]) -> subprocess.CompletedProcess[str]:
        try:
            return self._runner(cmd)
        except OSError as exc:
            raise DependencyResolutionError(f"failed to run {cmd[0]}: {exc}") from exc

    def fetch_dependencies(self) -> None:
        logger.debug("fetch dependencies")
        result = self._invoke(self._command("fetch"))
        if result.returncode != 0:
            raise DependencyResolutionError("failed to fetch dependencies")

    def package_metadata(self) -> CargoMetadata:
        result = self._invoke(self._command("metadata", "--format-version=1"))
        if result.returncode != 0:
            raise DependencyResolutionError("failed to run cargo metadata")
        try:
            return CargoMetadata.model_validate_json(result.stdout)
        except ValidationError as exc:
            raise DependencyResolutionError(f"failed to parse metadata: {exc}") from exc

    def build_hooks(self) -> list[BuildHook]:
        if self._fetch:
            self.fetch_dependencies()
        metadata = self.package_metadata()
        hooks: list[BuildHook] = []
        for pkg in find_build_scripts(metadata):
            hooks.append(
                BuildHook(
                    package=PackageIdentity(name=pkg.name, version=pkg.version),
                    hook_path=pkg.build_script(),
                )
            )
        logger.debug("found %d build scripts", len(hooks))
        return hooks
