"""Placeholder expansion for path-valued descriptor fields.

Recognised tokens are ``${ZED_WORKTREE_ROOT}``, ``${HOME}`` and
``${USER}``, plus their unbraced spellings (``$HOME``...).  Values come
from the host, never from this process's environment:

* the worktree root is passed in by the host;
* ``HOME`` is the host-supplied home directory, or, failing that, the
  ``/home/<name>`` prefix of the worktree root;
* ``USER`` is the last path segment of the resolved home.

Tokens whose value cannot be resolved are left in place verbatim.
"""

from __future__ import annotations

import re

from remote_attach_core.protocol import VAR_HOME, VAR_USER, VAR_WORKTREE_ROOT

_TOKEN_RE = re.compile(
    r"\$\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)\}|\$(?P<bare>[A-Za-z_][A-Za-z0-9_]*)"
)

_HOME_PREFIX = "/home/"


def infer_home(worktree_root: str | None) -> str | None:
    """Guess the home directory from a worktree path like ``/home/john/src``."""
    if not worktree_root:
        return None
    start = worktree_root.find(_HOME_PREFIX)
    if start < 0:
        return None
    rest = worktree_root[start + len(_HOME_PREFIX):]
    name = rest.split("/", 1)[0]
    if not name:
        return None
    return _HOME_PREFIX + name


def user_from_home(home: str | None) -> str | None:
    """``/home/alice`` -> ``alice``.  There is no other username source."""
    if not home:
        return None
    segment = home.rstrip("/\\").replace("\\", "/").rsplit("/", 1)[-1]
    return segment or None


def build_variables(
    worktree_root: str | None = None, home: str | None = None
) -> dict[str, str]:
    """Return the token -> value table for one session.

    Tokens without a value are simply absent from the table.
    """
    resolved_home = home or infer_home(worktree_root)
    table: dict[str, str] = {}
    if worktree_root:
        table[VAR_WORKTREE_ROOT] = worktree_root
    if resolved_home:
        table[VAR_HOME] = resolved_home
    user = user_from_home(resolved_home)
    if user:
        table[VAR_USER] = user
    return table


def expand_variables(value: str, variables: dict[str, str]) -> str:
    """Substitute known tokens in *value*; leave everything else alone.

    Substituted text is not rescanned, so expanding an already expanded
    string returns it unchanged.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group("braced") or match.group("bare")
        return variables.get(name, match.group(0))

    return _TOKEN_RE.sub(_replace, value)
