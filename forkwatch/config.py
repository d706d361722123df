"""Thresholds controlling branch status classification.

Usage
-----
Create thresholds with defaults:

>>> thresholds = StatusThresholds()
>>> thresholds.stale_days
14

Or load them from the ``FORKWATCH_STALE_BEHIND``, ``FORKWATCH_CONFLICT_BEHIND``
and ``FORKWATCH_STALE_DAYS`` environment variables with
:meth:`StatusThresholds.from_env`.

"""

from __future__ import annotations

import dataclasses as dc
import os


@dc.dataclass(frozen=True, slots=True)
class StatusThresholds:
    """Limits used when classifying a branch as fresh, stale or conflict-risk.

    Attributes
    ----------
    stale_behind
        A branch more than this many commits behind its base is stale,
        whatever its age. Default is 50.
    conflict_behind
        A branch more than this many commits behind its base is at risk of
        merge conflicts. Default is 10.
    stale_days
        A branch whose last commit is more than this many whole days old is
        stale. Default is 14.

    """

    stale_behind: int = 50
    conflict_behind: int = 10
    stale_days: int = 14

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        """Read a positive integer env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise ValueError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @classmethod
    def from_env(cls) -> StatusThresholds:
        """Create thresholds from environment variables.

        Reads ``FORKWATCH_STALE_BEHIND``, ``FORKWATCH_CONFLICT_BEHIND`` and
        ``FORKWATCH_STALE_DAYS``; unset or blank variables keep the defaults.

        Raises
        ------
        ValueError
            If a variable is set but is not a positive integer.

        """
        defaults = cls()
        return cls(
            stale_behind=cls._parse_positive_int(
                "FORKWATCH_STALE_BEHIND", defaults.stale_behind
            ),
            conflict_behind=cls._parse_positive_int(
                "FORKWATCH_CONFLICT_BEHIND", defaults.conflict_behind
            ),
            stale_days=cls._parse_positive_int(
                "FORKWATCH_STALE_DAYS", defaults.stale_days
            ),
        )
