"""Parse GitHub owner and repository names out of git remote URLs."""

from __future__ import annotations

from .models import GitHubRemote

_GITHUB_HOST = "github.com"
_SCP_PREFIX = "git@github.com:"
_GIT_SUFFIX = ".git"


def _split_owner_repo(path: str) -> GitHubRemote | None:
    parts = path.strip("/").removesuffix(_GIT_SUFFIX).split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:  # noqa: PLR2004
        return None
    return GitHubRemote(owner=parts[0], repo=parts[1])


def parse_remote_url(url: str) -> GitHubRemote | None:
    """Return the GitHub repository a remote URL points at.

    Supports the scp-like SSH form and URL forms with or without the
    ``.git`` suffix. Returns ``None`` for anything that is not GitHub.

    Examples
    --------
    >>> parse_remote_url("git@github.com:owner/repo.git")
    GitHubRemote(owner='owner', repo='repo')
    >>> parse_remote_url("https://github.com/owner/repo")
    GitHubRemote(owner='owner', repo='repo')
    >>> parse_remote_url("https://gitlab.com/owner/repo") is None
    True

    """
    text = url.strip()

    if text.startswith(_SCP_PREFIX):
        rest = text.removeprefix(_SCP_PREFIX).removesuffix(_GIT_SUFFIX)
        parts = rest.split("/")
        if len(parts) == 2 and all(parts):  # noqa: PLR2004
            return GitHubRemote(owner=parts[0], repo=parts[1])
        return None

    index = text.find(_GITHUB_HOST)
    if index == -1:
        return None
    return _split_owner_repo(text[index + len(_GITHUB_HOST) :])
