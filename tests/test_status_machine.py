from datetime import datetime

import pytest

from permit_tracker.core.entities.package import PackageStatus
from permit_tracker.core.workflow.progress import Progress
from permit_tracker.core.workflow.status_machine import (
    can_transition,
    check_transition,
    status_options,
    suggest_next_status,
    transition_side_effects,
)

D = PackageStatus.DRAFT
P = PackageStatus.IN_PROGRESS
R = PackageStatus.READY_TO_SUBMIT
S = PackageStatus.SUBMITTED

COMPLETE = Progress(completed_documents=12, total_documents=12, progress_percentage=100)
PARTIAL = Progress(completed_documents=5, total_documents=12, progress_percentage=42)
EMPTY = Progress(completed_documents=0, total_documents=0, progress_percentage=0)


# (current, target) -> allowed, with every document complete
COMPLETE_TABLE = {
    (D, D): True, (D, P): True, (D, R): True, (D, S): False,
    (P, D): True, (P, P): True, (P, R): True, (P, S): False,
    (R, D): True, (R, P): True, (R, R): True, (R, S): True,
    (S, D): False, (S, P): False, (S, R): False, (S, S): False,
}


@pytest.mark.parametrize("pair,allowed", COMPLETE_TABLE.items())
def test_transition_table_with_complete_checklist(pair, allowed):
    current, target = pair
    assert can_transition(current, target, COMPLETE) is allowed


@pytest.mark.parametrize("current", [D, P, R])
def test_ready_to_submit_needs_every_document(current):
    check = check_transition(current, R, PARTIAL)
    assert not check.allowed
    assert check.reason == "documents incomplete (7 remaining)"


def test_ready_to_submit_needs_at_least_one_document():
    check = check_transition(P, R, EMPTY)
    assert not check.allowed
    assert check.reason == "package has no documents"


@pytest.mark.parametrize("current", [D, P])
def test_submit_only_from_ready(current):
    check = check_transition(current, S, COMPLETE)
    assert not check.allowed
    assert "ready to submit" in check.reason


@pytest.mark.parametrize("target", [D, P, R])
def test_submitted_is_terminal(target):
    check = check_transition(S, target, COMPLETE)
    assert not check.allowed
    assert check.reason == "package has already been submitted"


def test_moving_back_is_allowed_with_incomplete_documents():
    assert can_transition(R, P, PARTIAL)
    assert can_transition(P, D, PARTIAL)


def test_accepts_plain_strings():
    assert can_transition("ready_to_submit", "submitted", COMPLETE)


def test_status_options_cover_every_status():
    options = status_options(P, PARTIAL)
    assert [o.status for o in options] == [D, P, R, S]
    by_status = {o.status: o for o in options}
    assert by_status[D].allowed
    assert not by_status[R].allowed
    assert by_status[R].reason.startswith("documents incomplete")
    assert by_status[R].label == "Ready to Submit"


def test_suggested_next_status():
    assert suggest_next_status(D, PARTIAL) is P
    assert suggest_next_status(P, PARTIAL) is None
    assert suggest_next_status(P, COMPLETE) is R
    assert suggest_next_status(R, COMPLETE) is S
    assert suggest_next_status(S, COMPLETE) is None


def test_only_submission_has_side_effects():
    now = datetime(2024, 5, 1, 12, 0)
    assert transition_side_effects(S, now) == {"submitted_at": now}
    for target in (D, P, R):
        assert transition_side_effects(target, now) == {}
