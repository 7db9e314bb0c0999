"""Package identity and build hook models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class PackageIdentity(BaseModel):
    """Uniquely identifies one dependency instance as ``name@version``."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str

    @property
    def pkg_id(self) -> str:
        """The canonical ``name@version`` string used as ledger associate and snapshot name."""
        return f"{self.name}@{self.version}"

    def __str__(self) -> str:
        return self.pkg_id


class BuildHook(BaseModel):
    """A build-time executable hook discovered in the dependency tree."""

    model_config = ConfigDict(frozen=True)

    package: PackageIdentity
    hook_path: Path

    @property
    def pkg_id(self) -> str:
        return self.package.pkg_id
