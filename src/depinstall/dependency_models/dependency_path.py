"""
Pydantic data models for installed dependencies.
"""

import typing
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ArchiveType(str, Enum):
    """
    Compression/container format of a downloaded package.

    The installer only selects a value from the file name; interpreting the
    format is the extractor's job.
    """

    TAR_GZ = "tar.gz"
    TAR_BZ2 = "tar.bz2"
    TAR_XZ = "tar.xz"
    TAR = "tar"
    ZIP = "zip"
    GZ = "gz"


class DependencyPath(BaseModel):
    """
    A package or toolset known to the package manager, identified by
    logical name and filesystem location.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Logical package name")
    path: str = Field(..., min_length=1, description="Location on the filesystem")
    description: typing.Optional[str] = Field(
        default=None, alias="_description", description="Description"
    )
