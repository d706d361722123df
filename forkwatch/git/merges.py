"""Merge-commit discovery and pull-request extraction from commit subjects."""

from __future__ import annotations

import re
import typing as typ

from .models import MergeNodePage, MergeRecord

if typ.TYPE_CHECKING:
    from .gateway import GitGateway, MergeHistoryEntry, RepoPath

_MERGE_PR_PREFIX = "Merge pull request #"
_FROM_PREFIX = "from "
_DIGITS = re.compile(r"[0-9]+")
_HASH_NUMBER = re.compile(r"#([0-9]+)")
# Pull request numbers are stored as signed 32-bit integers upstream; larger
# values are treated as noise rather than references.
_MAX_PR_NUMBER = 2**31 - 1


def _to_pr_number(text: str) -> int | None:
    if not _DIGITS.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _MAX_PR_NUMBER else None


def _from_merge_pull_request(subject: str) -> tuple[int, str | None] | None:
    if not subject.startswith(_MERGE_PR_PREFIX):
        return None
    rest = subject.removeprefix(_MERGE_PR_PREFIX)
    number_text, sep, tail = rest.partition(" ")
    number = _to_pr_number(number_text)
    if number is None:
        return None
    if not sep:
        return number, None
    return number, tail.removeprefix(_FROM_PREFIX)


def _from_parenthesized(subject: str) -> tuple[int, str | None] | None:
    start = subject.find("(#")
    if start == -1:
        return None
    end = subject.find(")", start)
    if end == -1:
        return None
    number = _to_pr_number(subject[start + 2 : end])
    if number is None:
        return None
    title = subject[:start].strip()
    return number, title or None


def _from_bare_reference(subject: str) -> tuple[int, str | None] | None:
    for match in _HASH_NUMBER.finditer(subject):
        number = _to_pr_number(match.group(1))
        if number is not None:
            return number, None
    return None


_EXTRACTORS = (_from_merge_pull_request, _from_parenthesized, _from_bare_reference)


def parse_pull_request_reference(subject: str) -> tuple[int | None, str | None]:
    """Extract ``(number, title)`` of the pull request a subject refers to.

    Recognised forms, in priority order:

    - ``Merge pull request #123 from owner/branch``: the title is the text
      after ``from``.
    - ``Some change (#123)``: the title is the text before the parenthesis.
    - any ``#123`` reference: no title.

    Examples
    --------
    >>> parse_pull_request_reference("Merge pull request #123 from alice/feature-x")
    (123, 'alice/feature-x')
    >>> parse_pull_request_reference("Fix bug (#456)")
    (456, 'Fix bug')
    >>> parse_pull_request_reference("See issue #789 for details")
    (789, None)
    >>> parse_pull_request_reference("No reference here")
    (None, None)

    """
    for extractor in _EXTRACTORS:
        found = extractor(subject)
        if found is not None:
            return found
    return (None, None)


def merge_record_from_entry(entry: MergeHistoryEntry) -> MergeRecord:
    """Build a :class:`MergeRecord` from a raw history entry."""
    pr_number, pr_title = parse_pull_request_reference(entry.subject)
    return MergeRecord(
        full_sha=entry.full_sha,
        sha=entry.short_sha,
        date=entry.date,
        pr_number=pr_number,
        pr_title=pr_title,
    )


class MergeCommitExtractor:
    """Page through a branch's merge commits."""

    def __init__(self, gateway: GitGateway) -> None:
        """Initialise with the gateway used to read history."""
        self._gateway = gateway

    def get_merge_nodes(
        self, repo: RepoPath, branch: str, page: int, per_page: int
    ) -> MergeNodePage:
        """Return page ``page`` (zero-based) of merge commits on ``branch``.

        One record beyond ``per_page`` is requested so ``has_more`` can be
        answered without a second query; it is never returned.

        Raises
        ------
        ValueError
            If ``page`` is negative or ``per_page`` is not positive.
        GitError
            If the history cannot be read.

        """
        if page < 0:
            msg = f"page must be non-negative, got: {page}"
            raise ValueError(msg)
        if per_page < 1:
            msg = f"per_page must be positive, got: {per_page}"
            raise ValueError(msg)

        entries = self._gateway.merge_history(
            repo, branch, skip=page * per_page, limit=per_page + 1
        )
        has_more = len(entries) > per_page
        records = tuple(merge_record_from_entry(entry) for entry in entries[:per_page])
        return MergeNodePage(nodes=records, has_more=has_more)
