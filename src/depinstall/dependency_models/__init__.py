"""
Dependency models.

This package provides the Pydantic data models shared between the installation
workflow and the package-manager collaborator: the name-to-location record of an
installed package and the archive formats the extractor understands.
"""

from .dependency_path import (
    ArchiveType,
    DependencyPath,
)

__all__ = [
    "ArchiveType",
    "DependencyPath",
]
