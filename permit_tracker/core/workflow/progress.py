"""
Progress Calculator.

Derives completion counts and percentage from a package's checklist.
Never stored: completion changes independently through document updates,
so every read recomputes it.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from permit_tracker.core.entities.document import PackageDocument


@dataclass(frozen=True)
class Progress:
    completed_documents: int
    total_documents: int
    progress_percentage: int

    @property
    def is_complete(self) -> bool:
        return self.total_documents > 0 and self.completed_documents == self.total_documents


def compute_progress(documents: Iterable[PackageDocument]) -> Progress:
    """Count completed vs. all documents (required and optional alike)."""
    total = 0
    completed = 0
    for doc in documents:
        total += 1
        if doc.is_completed:
            completed += 1

    if total == 0:
        return Progress(completed_documents=0, total_documents=0, progress_percentage=0)

    # Integer round-half-up: 1/8 -> 13, 5/8 -> 63
    percentage = (completed * 200 + total) // (2 * total)
    return Progress(
        completed_documents=completed,
        total_documents=total,
        progress_percentage=percentage,
    )
