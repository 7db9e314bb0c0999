"""Metadata providers that locate build hooks in a dependency tree."""

from buildtrust.providers.cargo import CargoMetadataProvider

__all__ = ["CargoMetadataProvider"]
