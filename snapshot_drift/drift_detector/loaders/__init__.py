"""
Snapshot Loaders Package.

This package turns a snapshot directory into identity-keyed ResourceSets,
one per resource category.
"""

from .association_loaders import build_association_set
from .base import (
    LoaderOptions,
    ResourceEntry,
    ResourceSet,
    build_resource_set,
    list_documents,
)

__all__ = [
    "LoaderOptions",
    "ResourceEntry",
    "ResourceSet",
    "build_resource_set",
    "build_association_set",
    "list_documents",
]
