"""Behavioural tests for pull request correlation."""

from __future__ import annotations

import asyncio
import typing as typ

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from forkwatch.github.correlator import PullRequestCorrelator
from forkwatch.github.models import PullRequestHead, PullRequestRaw
from tests.helpers.fakes import FakePullRequestClient
from tests.helpers.femtologging_capture import capture_femto_logs

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from forkwatch.github.models import PullRequest
    from tests.helpers.femtologging_capture import FemtoLogCapture


def run_async[T](coro: typ.Coroutine[typ.Any, typ.Any, T]) -> T:
    """Run async coroutines in sync BDD step functions."""
    return asyncio.run(coro)


class CorrelationContext(typ.TypedDict, total=False):
    """Shared state used by correlation steps."""

    client: FakePullRequestClient
    logs: FemtoLogCapture
    pull_requests: list[PullRequest]
    commit_shas: dict[int, list[str]]


@scenario(
    "../pull_request_correlation.feature",
    "Only merged pull requests are returned",
)
def test_only_merged_pull_requests_returned() -> None:
    """Behavioural test: declined pull requests are filtered out."""


@scenario(
    "../pull_request_correlation.feature",
    "A failed commit lookup does not fail the batch",
)
def test_failed_lookup_does_not_fail_batch() -> None:
    """Behavioural test: partial results survive a failing lookup."""


@pytest.fixture
def correlation_context() -> cabc.Iterator[CorrelationContext]:
    """Provide a fresh context with correlator logs captured."""
    with capture_femto_logs("forkwatch.github.correlator") as capture:
        yield {"logs": capture}


def _numbers(text: str) -> list[int]:
    return [int(part) for part in text.replace(" and ", ", ").split(", ")]


def _raw(number: int, *, merged: bool) -> PullRequestRaw:
    return PullRequestRaw(
        number=number,
        title=f"Change {number}",
        created_at="2024-05-01T00:00:00Z",
        head=PullRequestHead(ref=f"feature/{number}"),
        merged_at="2024-05-02T00:00:00Z" if merged else None,
        merge_commit_sha=f"{number:040x}" if merged else None,
    )


@given(
    parsers.parse("GitHub lists pull requests {numbers} where {declined:d} was declined")
)
def github_lists_pull_requests(
    correlation_context: CorrelationContext, numbers: str, declined: int
) -> None:
    """Configure the listing with one declined pull request."""
    correlation_context["client"] = FakePullRequestClient(
        pull_requests=[
            _raw(number, merged=number != declined) for number in _numbers(numbers)
        ]
    )


@given(
    parsers.parse(
        'pull request {number:d} has commits "{sha}" '
        "and pull request {failing:d} cannot be read"
    )
)
def commits_with_one_failure(
    correlation_context: CorrelationContext, number: int, sha: str, failing: int
) -> None:
    """Configure commit lookups where one number fails."""
    correlation_context["client"] = FakePullRequestClient(
        commits={number: [sha]}, failing={failing}
    )


@when(
    parsers.parse(
        'up to {limit:d} merged pull requests into "{base}" are requested'
    )
)
def request_merged_pull_requests(
    correlation_context: CorrelationContext, limit: int, base: str
) -> None:
    """Fetch merged pull requests through the correlator."""
    correlation_context["pull_requests"] = run_async(
        PullRequestCorrelator(
            correlation_context["client"]
        ).get_merged_pull_requests("octo", "reef", base, limit)
    )


@when(parsers.parse("the commits of pull requests {numbers} are requested"))
def request_commits(correlation_context: CorrelationContext, numbers: str) -> None:
    """Look up commits for several pull requests at once."""
    correlation_context["commit_shas"] = run_async(
        PullRequestCorrelator(
            correlation_context["client"]
        ).get_pull_request_commit_shas("octo", "reef", _numbers(numbers))
    )


@then(parsers.parse("pull requests {numbers} are returned"))
def pull_requests_returned(
    correlation_context: CorrelationContext, numbers: str
) -> None:
    """Assert the merged pull request numbers, in order."""
    returned = [pull.number for pull in correlation_context["pull_requests"]]
    assert returned == _numbers(numbers)


@then(parsers.parse("{per_page:d} closed pull requests were requested"))
def closed_pull_requests_requested(
    correlation_context: CorrelationContext, per_page: int
) -> None:
    """Assert the page size sent to the listing call."""
    assert correlation_context["client"].list_calls[0]["per_page"] == per_page


@then(parsers.parse('pull request {number:d} maps to "{short}"'))
def pull_request_maps_to(
    correlation_context: CorrelationContext, number: int, short: str
) -> None:
    """Assert the short hashes recorded for a pull request."""
    assert correlation_context["commit_shas"][number] == [short]


@then(parsers.parse("pull request {number:d} is absent from the result"))
def pull_request_absent(correlation_context: CorrelationContext, number: int) -> None:
    """Assert a failed lookup is missing and was logged."""
    assert number not in correlation_context["commit_shas"]
    logs = correlation_context["logs"]
    logs.wait_for_count(1)
    [record] = logs.records
    assert record.level == "WARN"
    assert f"#{number}" in record.message
