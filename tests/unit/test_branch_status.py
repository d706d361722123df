"""Unit tests for branch status classification and default-branch selection."""

from __future__ import annotations

import datetime as dt

import pytest

from forkwatch.config import StatusThresholds
from forkwatch.git.divergence import classify_branch_status, select_default_branch
from forkwatch.git.models import BranchStatus

_NOW = dt.datetime(2024, 6, 1, 12, 0, tzinfo=dt.UTC)


def _days_ago(days: float) -> str:
    return (_NOW - dt.timedelta(days=days)).isoformat()


@pytest.mark.parametrize(
    ("behind", "last_commit_date", "expected"),
    [
        (60, _days_ago(1), BranchStatus.STALE),
        (60, "not a date", BranchStatus.STALE),
        (51, _days_ago(0), BranchStatus.STALE),
        (50, _days_ago(0), BranchStatus.CONFLICT_RISK),
        (15, _days_ago(100), BranchStatus.CONFLICT_RISK),
        (11, _days_ago(1), BranchStatus.CONFLICT_RISK),
        (10, _days_ago(1), BranchStatus.FRESH),
        (3, _days_ago(20), BranchStatus.STALE),
        (3, _days_ago(1), BranchStatus.FRESH),
        (0, _days_ago(14.5), BranchStatus.FRESH),
        (0, _days_ago(15), BranchStatus.STALE),
        (3, "", BranchStatus.FRESH),
        (3, "last tuesday", BranchStatus.FRESH),
    ],
)
def test_classify_branch_status(
    behind: int, last_commit_date: str, expected: BranchStatus
) -> None:
    """Rules apply in priority order and bad dates are never stale."""
    assert classify_branch_status(behind, last_commit_date, now=_NOW) == expected


def test_classify_branch_status_reads_offset_timestamps() -> None:
    """Timestamps with a non-UTC offset are compared as instants."""
    last_commit = "2024-05-17T23:30:00-02:00"  # 2024-05-18T01:30Z, 14.4 days ago
    assert classify_branch_status(0, last_commit, now=_NOW) == BranchStatus.FRESH


def test_classify_branch_status_honours_custom_thresholds() -> None:
    """Thresholds replace the default limits."""
    thresholds = StatusThresholds(stale_behind=5, conflict_behind=2, stale_days=3)

    assert (
        classify_branch_status(6, _days_ago(0), now=_NOW, thresholds=thresholds)
        == BranchStatus.STALE
    )
    assert (
        classify_branch_status(3, _days_ago(0), now=_NOW, thresholds=thresholds)
        == BranchStatus.CONFLICT_RISK
    )
    assert (
        classify_branch_status(0, _days_ago(4), now=_NOW, thresholds=thresholds)
        == BranchStatus.STALE
    )


@pytest.mark.parametrize(
    ("remote_head", "existing", "expected"),
    [
        ("develop", {"main": True}, "develop"),
        (None, {"main": True, "master": True}, "main"),
        (None, {"main": False, "master": True}, "master"),
        (None, {}, "HEAD"),
        ("", {"master": True}, "master"),
    ],
)
def test_select_default_branch(
    remote_head: str | None, existing: dict[str, bool], expected: str
) -> None:
    """The fallback chain is remote head, main, master, then HEAD."""
    assert select_default_branch(remote_head, existing) == expected


def test_select_default_branch_stops_probing_after_first_match() -> None:
    """A predicate is only consulted until a candidate exists."""
    probed: list[str] = []

    def exists(name: str) -> bool:
        probed.append(name)
        return name == "main"

    assert select_default_branch(None, exists) == "main"
    assert probed == ["main"]


def test_select_default_branch_skips_probes_with_remote_head() -> None:
    """No candidate is probed when the remote head is known."""

    def exists(name: str) -> bool:
        pytest.fail(f"unexpected lookup of {name}")

    assert select_default_branch("trunk", exists) == "trunk"
