"""
Base Snapshot Loaders Module.

This module builds a ResourceSet (identity key -> parsed document) for one
category of one snapshot, using one of three identity strategies:
- EXACT: the filename itself
- PREFIX: the filename up to the first separator character
- IDENTIFIER: the document's resource identifier field, lower-cased

Unparsable documents and ambiguous keys are logged, recorded as warnings on
the ResourceSet, and left out; they never abort the run.
"""

import fnmatch
import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from ...exceptions import FatalInputError, IdentityAmbiguity, ParseError
from ...utils import read_document_text, setup_logging
from ..categories import Category, stem_matches
from ..document import DocumentNode, NodeKind, get_field, normalize_identifier, parse
from ..types import (
    IDENTITY_AMBIGUITY,
    PARSE_ERROR,
    AmbiguityPolicy,
    MatchMode,
    Side,
    WarningRecord,
)

logger = setup_logging()


@dataclass(frozen=True)
class LoaderOptions:
    """Settings shared by every ResourceSet built in one comparison run."""

    match_mode: MatchMode = MatchMode.IDENTIFIER
    file_pattern: str = "*.json"
    identifier_field: str = "id"
    prefix_separator: str = "-"
    ambiguity_policy: AmbiguityPolicy = AmbiguityPolicy.FIRST


@dataclass(frozen=True)
class ResourceEntry:
    key: str
    # Path relative to the snapshot root, e.g. 'vms/web01.json'
    path: str
    document: DocumentNode
    text: str


@dataclass(frozen=True)
class ResourceSet:
    """
    The documents of one category in one snapshot, keyed by identity.

    Built once per run and not modified afterwards.
    """

    category: str
    side: Side
    entries: Mapping[str, ResourceEntry]
    # Every participating filename in the category, matched or not
    filenames: Tuple[str, ...] = ()
    warnings: Tuple[WarningRecord, ...] = ()

    def keys(self) -> Tuple[str, ...]:
        return tuple(sorted(self.entries))

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __getitem__(self, key: str) -> ResourceEntry:
        return self.entries[key]

    def __len__(self) -> int:
        return len(self.entries)


def list_documents(directory: str, file_pattern: str) -> List[str]:
    """
    List the files in a directory matching the filter pattern, sorted by name.

    A missing directory lists as empty: the category simply has no documents
    on that side.

    Raises:
        FatalInputError: If the directory exists but cannot be listed
    """
    if not os.path.isdir(directory):
        logger.debug(f"Directory not found, treating as empty: {directory}")
        return []
    try:
        names = os.listdir(directory)
    except OSError as e:
        logger.error(f"Cannot list snapshot directory {directory}: {e}")
        raise FatalInputError(f"Snapshot directory is not readable: {directory}")
    return sorted(
        name
        for name in names
        if fnmatch.fnmatch(name, file_pattern)
        and os.path.isfile(os.path.join(directory, name))
    )


def load_document(
    root: str, relative_path: str, warnings: List[WarningRecord]
) -> Optional[Tuple[DocumentNode, str]]:
    """
    Read and parse one document.

    Returns:
        (document, text), or None when the file cannot be read or parsed, in
        which case a parse_error warning is appended to ``warnings``
    """
    full_path = os.path.join(root, relative_path)
    try:
        text = read_document_text(full_path)
        return parse(text, relative_path), text
    except ParseError as e:
        message = str(e)
    except (OSError, UnicodeDecodeError) as e:
        message = f"Failed to read {relative_path}: {e}"
    logger.warning(message)
    warnings.append(WarningRecord(PARSE_ERROR, message, relative_path))
    return None


def extract_identifier(document: DocumentNode, identifier_field: str) -> Optional[str]:
    """Return the normalised identifier of a document, or None if it has none."""
    node = get_field(document, identifier_field)
    if node is None or node.kind is not NodeKind.SCALAR:
        return None
    value = node.value  # type: ignore[union-attr]
    if not isinstance(value, str) or not value:
        return None
    return normalize_identifier(value)


def filename_key(filename: str, options: LoaderOptions) -> str:
    """Key a document by its filename (EXACT) or filename prefix (PREFIX)."""
    if options.match_mode is MatchMode.PREFIX:
        return filename.split(options.prefix_separator, 1)[0]
    return filename


def select_candidate(key: str, candidates: List[ResourceEntry]) -> ResourceEntry:
    """
    Return the single document claiming a key.

    Raises:
        IdentityAmbiguity: If more than one document claims the key
    """
    if len(candidates) > 1:
        raise IdentityAmbiguity(key, [c.path for c in candidates])
    return candidates[0]


def resolve_entries(
    candidates: Dict[str, List[ResourceEntry]],
    options: LoaderOptions,
    warnings: List[WarningRecord],
) -> Dict[str, ResourceEntry]:
    """
    Collapse key -> candidate documents into key -> one document.

    Ambiguous keys follow the ambiguity policy: FIRST keeps the candidate
    with the lexicographically smallest path, EXCLUDE drops the key. Both
    record an identity_ambiguity warning; documents are never merged.
    """
    entries: Dict[str, ResourceEntry] = {}
    for key in sorted(candidates):
        group = sorted(candidates[key], key=lambda entry: entry.path)
        try:
            entries[key] = select_candidate(key, group)
        except IdentityAmbiguity as e:
            if options.ambiguity_policy is AmbiguityPolicy.EXCLUDE:
                message = f"{e}; key excluded from comparison"
            else:
                entries[key] = group[0]
                message = f"{e}; using {group[0].path}"
            logger.warning(message)
            warnings.append(WarningRecord(IDENTITY_AMBIGUITY, message, group[0].path))
    return entries


def build_resource_set(
    root: str, category: Category, side: Side, options: LoaderOptions
) -> ResourceSet:
    """
    Load one category of one snapshot into a ResourceSet.

    Association categories are delegated to the association loader when
    documents are keyed by identifier, since their key comes from the
    sibling base document.

    Args:
        root: Local snapshot root directory
        category: Category to load
        side: Which snapshot the root belongs to
        options: Identity strategy and file filter settings

    Returns:
        Immutable ResourceSet for the category
    """
    if (
        category.association_suffix is not None
        and options.match_mode is MatchMode.IDENTIFIER
    ):
        from .association_loaders import build_association_set

        return build_association_set(root, category, side, options)

    directory = os.path.join(root, category.directory)
    filenames = [
        name
        for name in list_documents(directory, options.file_pattern)
        if stem_matches(name, category)
    ]
    warnings: List[WarningRecord] = []
    candidates: Dict[str, List[ResourceEntry]] = {}

    for filename in filenames:
        relative_path = os.path.join(category.directory, filename)
        loaded = load_document(root, relative_path, warnings)
        if loaded is None:
            continue
        document, text = loaded

        if options.match_mode is MatchMode.IDENTIFIER:
            key = extract_identifier(document, options.identifier_field)
            if key is None:
                logger.warning(
                    f"No '{options.identifier_field}' field in {relative_path}; "
                    f"document excluded"
                )
                continue
        else:
            key = filename_key(filename, options)

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
