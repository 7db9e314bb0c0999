"""buildtrust data models — Pydantic v2."""

from buildtrust.models.cargo import CargoMetadata, CargoPackage, CargoTarget
from buildtrust.models.ledger import LEDGER_FILE_ADAPTER, TrustRecord
from buildtrust.models.packages import BuildHook, PackageIdentity
from buildtrust.models.review import (
    VALID_TRANSITIONS,
    ReviewState,
    ReviewSummary,
    ReviewTransition,
)

__all__ = [
    # packages
    "PackageIdentity",
    "BuildHook",
    # ledger
    "TrustRecord",
    "LEDGER_FILE_ADAPTER",
    # review
    "ReviewState",
    "ReviewTransition",
    "ReviewSummary",
    "VALID_TRANSITIONS",
    # cargo
    "CargoMetadata",
    "CargoPackage",
    "CargoTarget",
]
