"""Branch divergence analysis against the repository's mainline.

The analyzer answers three questions for every local branch: how far it has
moved away from the base branch (ahead/behind), where it forked off (the
merge base), and whether it is still fresh. Classification is a pure
function of the behind count and the last commit date so it can be tested
without a repository.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from forkwatch.common.time import parse_iso_timestamp, utcnow
from forkwatch.config import StatusThresholds
from forkwatch.logging import get_logger, log_warning

from .errors import GitError
from .models import Branch, BranchStatus

if typ.TYPE_CHECKING:
    import datetime as dt

    from .gateway import GitGateway, RepoPath

logger = get_logger(__name__)

DEFAULT_BRANCH_CANDIDATES: tuple[str, ...] = ("main", "master")
HEAD_REF = "HEAD"


def select_default_branch(
    remote_head: str | None,
    existing_refs: cabc.Mapping[str, bool] | cabc.Callable[[str], bool],
    *,
    candidates: cabc.Sequence[str] = DEFAULT_BRANCH_CANDIDATES,
) -> str:
    """Pick the mainline branch from the results of ref lookups already run.

    Parameters
    ----------
    remote_head
        Branch named by ``origin/HEAD``, or ``None`` when unresolvable.
    existing_refs
        Either a mapping of candidate name to "exists" or a predicate that
        answers the same question. A predicate is only called until a
        candidate matches.
    candidates
        Fallback branch names in priority order.

    Returns
    -------
    str
        ``remote_head`` when set, else the first existing candidate, else
        ``"HEAD"``.

    Examples
    --------
    >>> select_default_branch(None, {"main": False, "master": True})
    'master'
    >>> select_default_branch(None, {})
    'HEAD'

    """
    if remote_head:
        return remote_head
    exists = (
        existing_refs
        if callable(existing_refs)
        else (lambda name: existing_refs.get(name, False))
    )
    for candidate in candidates:
        if exists(candidate):
            return candidate
    return HEAD_REF


def classify_branch_status(
    commits_behind: int,
    last_commit_date: str,
    *,
    now: dt.datetime,
    thresholds: StatusThresholds | None = None,
) -> BranchStatus:
    """Classify a branch from how far behind it is and how old it is.

    Rules are tried in order: far behind is stale, moderately behind is a
    conflict risk, an old last commit is stale, anything else is fresh. An
    unparseable ``last_commit_date`` is never stale.

    Examples
    --------
    >>> import datetime as dt
    >>> now = dt.datetime(2024, 6, 1, tzinfo=dt.UTC)
    >>> classify_branch_status(60, "", now=now)
    <BranchStatus.STALE: 'stale'>
    >>> classify_branch_status(15, "", now=now)
    <BranchStatus.CONFLICT_RISK: 'conflict-risk'>

    """
    limits = thresholds or StatusThresholds()
    if commits_behind > limits.stale_behind:
        return BranchStatus.STALE
    if commits_behind > limits.conflict_behind:
        return BranchStatus.CONFLICT_RISK

    committed_at = parse_iso_timestamp(last_commit_date)
    if committed_at is not None and (now - committed_at).days > limits.stale_days:
        return BranchStatus.STALE
    return BranchStatus.FRESH


def _sort_key(branch: Branch) -> str:
    return branch.last_commit_date


class BranchDivergenceAnalyzer:
    """Compute :class:`Branch` records through a :class:`GitGateway`."""

    def __init__(
        self,
        gateway: GitGateway,
        *,
        thresholds: StatusThresholds | None = None,
        clock: cabc.Callable[[], dt.datetime] = utcnow,
    ) -> None:
        """Initialise with a gateway, classification thresholds and a clock."""
        self._gateway = gateway
        self._thresholds = thresholds or StatusThresholds()
        self._clock = clock

    def get_default_branch(self, repo: RepoPath) -> str:
        """Return the mainline branch of ``repo``; never raises for lookups."""
        return select_default_branch(
            self._gateway.symbolic_remote_head(repo),
            lambda name: self._gateway.ref_exists(repo, name),
        )

    def get_branch(self, repo: RepoPath, name: str, base: str) -> Branch:
        """Compute divergence and status for ``name`` relative to ``base``.

        Raises
        ------
        GitError
            If any of the underlying git queries fails.

        """
        # The gateway lists the base side first: (behind, ahead).
        commits_behind, commits_ahead = self._gateway.revision_range(
            repo, base, name
        )
        head = self._gateway.last_commit(repo, name)

        diverged_from_sha = self._gateway.common_ancestor(repo, base, name)
        diverged_from_date: str | None = None
        if diverged_from_sha is not None:
            diverged_from_date = self._gateway.last_commit(
                repo, diverged_from_sha
            ).date

        status = classify_branch_status(
            commits_behind,
            head.date,
            now=self._clock(),
            thresholds=self._thresholds,
        )
        return Branch(
            name=name,
            commits_ahead=max(commits_ahead, 0),
            commits_behind=max(commits_behind, 0),
            head_sha=head.sha,
            last_commit_date=head.date,
            last_commit_author=head.author,
            status=status,
            diverged_from_sha=diverged_from_sha,
            diverged_from_date=diverged_from_date,
        )

    def list_branches(self, repo: RepoPath, base: str | None = None) -> list[Branch]:
        """Return every local branch except ``base``, most recent first.

        Branches whose lookups fail are logged and left out. Ordering compares
        the ISO-8601 ``last_commit_date`` strings lexically.

        Raises
        ------
        GitError
            If the branch names themselves cannot be listed.

        """
        base_branch = base if base is not None else self.get_default_branch(repo)
        names = self._gateway.list_local_branch_names(repo)

        branches: list[Branch] = []
        for name in names:
            if name == base_branch:
                continue
            try:
                branches.append(self.get_branch(repo, name, base_branch))
            except GitError as exc:
                log_warning(
                    logger,
                    "Skipping branch %s in %s: %s",
                    name,
                    repo,
                    exc,
                )
        branches.sort(key=_sort_key, reverse=True)
        return branches
