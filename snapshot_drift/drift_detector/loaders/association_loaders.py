"""
Association Document Loaders Module.

An association document (a VM's instance view or extension list) does not
carry its parent's identifier. It is keyed by the identifier of its sibling
base document: 'web01_instanceView.json' takes the key of 'web01.json'.
"""

import os
from types import MappingProxyType
from typing import Dict, List, Optional

from ..categories import Category, stem_matches
from ..types import MISSING_BASE_DOCUMENT, Side, WarningRecord
from .base import (
    LoaderOptions,
    ResourceEntry,
    ResourceSet,
    extract_identifier,
    list_documents,
    load_document,
    logger,
    resolve_entries,
)


def base_document_name(filename: str, suffix: str) -> str:
    """'web01_instanceView.json' with suffix '_instanceView' -> 'web01.json'."""
    stem, extension = os.path.splitext(filename)
    return stem[: -len(suffix)] + extension


def build_association_set(
    root: str, category: Category, side: Side, options: LoaderOptions
) -> ResourceSet:
    """
    Load the association documents of a category, keyed by parent identifier.

    Association documents whose base document is missing are excluded with a
    missing_base_document warning. Base documents without an identifier
    exclude their associations the same way they are excluded themselves.
    """
    suffix = category.association_suffix or ""
    directory = os.path.join(root, category.directory)
    filenames = [
        name
        for name in list_documents(directory, options.file_pattern)
        if stem_matches(name, category)
    ]
    warnings: List[WarningRecord] = []
    candidates: Dict[str, List[ResourceEntry]] = {}
    # A base document is parsed at most once even if several suffixes share it
    parent_keys: Dict[str, Optional[str]] = {}

    for filename in filenames:
        relative_path = os.path.join(category.directory, filename)
        base_name = base_document_name(filename, suffix)
        base_path = os.path.join(category.directory, base_name)

        if base_name not in parent_keys:
            if not os.path.isfile(os.path.join(root, base_path)):
                message = (
                    f"Base document {base_path} for {relative_path} not found; "
                    f"association excluded"
                )
                logger.warning(message)
                warnings.append(
                    WarningRecord(MISSING_BASE_DOCUMENT, message, relative_path)
                )
                continue
            # Base parse failures are reported by the base category's own pass
            loaded_base = load_document(root, base_path, [])
            parent_keys[base_name] = (
                extract_identifier(loaded_base[0], options.identifier_field)
                if loaded_base is not None
                else None
            )

        key = parent_keys[base_name]
        if key is None:
            logger.warning(
                f"Base document {base_path} has no usable "
                f"'{options.identifier_field}'; {relative_path} excluded"
            )
            continue

        loaded = load_document(root, relative_path, warnings)
        if loaded is None:
            continue
        document, text = loaded
        candidates.setdefault(key, []).append(
            ResourceEntry(key, relative_path, document, text)
        )

    entries = resolve_entries(candidates, options, warnings)
    logger.info(
        f"Loaded {len(entries)} {category.name} document(s) from {side.value} snapshot"
    )
    return ResourceSet(
        category=category.name,
        side=side,
        entries=MappingProxyType(entries),
        filenames=tuple(filenames),
        warnings=tuple(warnings),
    )
