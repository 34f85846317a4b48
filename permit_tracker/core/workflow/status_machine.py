"""
Package Status Machine.

Single source of truth for which status changes are legal. The caller picks a
target status; the machine answers whether it is allowed and why not. It never
raises: turning a refusal into an error is the use case's job.

    Target            Allowed when
    draft             current != submitted
    in_progress       current != submitted
    ready_to_submit   all documents completed, at least one document,
                      current != submitted
    submitted         current == ready_to_submit
"""

from dataclasses import dataclass
from datetime import datetime

from permit_tracker.core.entities.package import PackageStatus
from permit_tracker.core.workflow.progress import Progress


@dataclass(frozen=True)
class TransitionCheck:
    allowed: bool
    reason: str | None = None


@dataclass(frozen=True)
class StatusOption:
    status: PackageStatus
    label: str
    allowed: bool
    reason: str | None = None


ALLOWED = TransitionCheck(allowed=True)


def check_transition(
    current: PackageStatus,
    target: PackageStatus,
    progress: Progress,
) -> TransitionCheck:
    """Evaluate one (current, target) pair against the transition table."""
    current = PackageStatus(current)
    target = PackageStatus(target)

    if target is PackageStatus.SUBMITTED:
        if current is PackageStatus.READY_TO_SUBMIT:
            return ALLOWED
        return TransitionCheck(False, "only packages that are ready to submit can be submitted")

    if current is PackageStatus.SUBMITTED:
        return TransitionCheck(False, "package has already been submitted")

    if target is PackageStatus.READY_TO_SUBMIT:
        if progress.total_documents == 0:
            return TransitionCheck(False, "package has no documents")
        if progress.completed_documents != progress.total_documents:
            missing = progress.total_documents - progress.completed_documents
            return TransitionCheck(False, f"documents incomplete ({missing} remaining)")

    return ALLOWED


def can_transition(current: PackageStatus, target: PackageStatus, progress: Progress) -> bool:
    return check_transition(current, target, progress).allowed


def status_options(current: PackageStatus, progress: Progress) -> list[StatusOption]:
    """Every status with its legality, for UIs that disable illegal choices."""
    options = []
    for status in PackageStatus:
        check = check_transition(current, status, progress)
        options.append(StatusOption(status, status.label, check.allowed, check.reason))
    return options


def suggest_next_status(current: PackageStatus, progress: Progress) -> PackageStatus | None:
    """Advisory next step. Not enforced."""
    current = PackageStatus(current)
    if current is PackageStatus.DRAFT:
        return PackageStatus.IN_PROGRESS
    if current is PackageStatus.IN_PROGRESS and progress.is_complete:
        return PackageStatus.READY_TO_SUBMIT
    if current is PackageStatus.READY_TO_SUBMIT:
        return PackageStatus.SUBMITTED
    return None


def transition_side_effects(target: PackageStatus, now: datetime) -> dict:
    """Extra fields written with a status change. Nothing ever clears submitted_at."""
    if PackageStatus(target) is PackageStatus.SUBMITTED:
        return {"submitted_at": now}
    return {}
