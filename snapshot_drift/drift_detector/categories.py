"""
Resource category table.

Each category is compared independently. Virtual machines carry association
documents (runtime status, extensions) stored next to the base document as
'<name>_instanceView.json' and '<name>_extensions.json'; each association
kind gets its own section right after the VM section.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Category:
    name: str
    # Subdirectory of the snapshot root; "" means the root itself
    directory: str
    # Set for association sections: documents whose stem ends with this suffix
    association_suffix: Optional[str] = None
    # Stem suffixes excluded from a base section
    excluded_suffixes: Tuple[str, ...] = ()
    # Filenames that never belong to the category
    excluded_names: Tuple[str, ...] = ()


VM_ASSOCIATION_SUFFIXES = ("_instanceView", "_extensions")

CATEGORIES: Tuple[Category, ...] = (
    Category("vms", "vms", excluded_suffixes=VM_ASSOCIATION_SUFFIXES),
    Category("vms:instanceView", "vms", association_suffix="_instanceView"),
    Category("vms:extensions", "vms", association_suffix="_extensions"),
    Category("nics", "nics"),
    Category("pips", "pips"),
    Category("disks", "disks"),
    Category("vnets", "vnets"),
    Category("subnets", "subnets"),
    Category("nsgs", "nsgs"),
)

CATEGORY_DIRECTORIES = tuple(dict.fromkeys(c.directory for c in CATEGORIES))

# A snapshot without category subfolders is compared as one flat folder
FLAT_CATEGORY = Category("files", "")


def detect_categories(baseline_root: str, current_root: str) -> Tuple[Category, ...]:
    """
    Return the categories to compare for a pair of snapshot roots.

    The categorized layout is used when either root holds at least one known
    category subfolder; otherwise both roots are compared as flat folders.
    """
    for root in (baseline_root, current_root):
        for directory in CATEGORY_DIRECTORIES:
            if os.path.isdir(os.path.join(root, directory)):
                return CATEGORIES
    return (FLAT_CATEGORY,)


def stem_matches(filename: str, category: Category) -> bool:
    """Whether a file in the category's directory belongs to this category."""
    if filename in category.excluded_names:
        return False
    stem = os.path.splitext(filename)[0]
    if category.association_suffix is not None:
        return stem.endswith(category.association_suffix) and stem != category.association_suffix
    return not any(stem.endswith(suffix) for suffix in category.excluded_suffixes)
