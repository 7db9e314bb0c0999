"""Subset of ``cargo metadata --format-version=1`` output that buildtrust reads."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

CUSTOM_BUILD_KIND = "custom-build"


class CargoTarget(BaseModel):
    """One compilation target of a package."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: list[str]
    src_path: str

    @property
    def is_build_script(self) -> bool:
        return CUSTOM_BUILD_KIND in self.kind


class CargoPackage(BaseModel):
    """A package entry from cargo metadata."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    version: str
    targets: list[CargoTarget] = []

    def build_script(self) -> Path | None:
        """Return the path of the package's ``build.rs``, if it has one."""
        for target in self.targets:
            if target.is_build_script:
                return Path(target.src_path)
        return None


class CargoMetadata(BaseModel):
    """Top-level cargo metadata document."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    packages: list[CargoPackage]
