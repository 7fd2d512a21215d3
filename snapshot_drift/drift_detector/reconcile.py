"""
Resource set reconciliation.

Classifies the keys of a baseline and a current ResourceSet into added,
removed, changed and unchanged. Every key of either set lands in exactly one
of the four groups.
"""

from dataclasses import dataclass
from typing import Tuple

from .comparators import documents_equal
from .loaders import ResourceSet
from .types import EqualityMode


@dataclass(frozen=True)
class ReconciliationResult:
    added: Tuple[str, ...] = ()
    removed: Tuple[str, ...] = ()
    changed: Tuple[str, ...] = ()
    unchanged: Tuple[str, ...] = ()

    @property
    def has_differences(self) -> bool:
        return bool(self.added or self.removed or self.changed)


def reconcile(
    base: ResourceSet,
    current: ResourceSet,
    equality_mode: EqualityMode = EqualityMode.STRUCTURAL,
) -> ReconciliationResult:
    """
    Reconcile two ResourceSets of the same category.

    Args:
        base: Documents from the baseline snapshot
        current: Documents from the current snapshot
        equality_mode: How documents present on both sides are judged equal;
            one mode is used for the whole run

    Returns:
        ReconciliationResult with each group sorted by key
    """
    base_keys = set(base.entries)
    current_keys = set(current.entries)

    changed = []
    unchanged = []
    for key in sorted(base_keys & current_keys):
        if documents_equal(base[key], current[key], equality_mode):
            unchanged.append(key)
        else:
            changed.append(key)

    return ReconciliationResult(
        added=tuple(sorted(current_keys - base_keys)),
        removed=tuple(sorted(base_keys - current_keys)),
        changed=tuple(changed),
        unchanged=tuple(unchanged),
    )
