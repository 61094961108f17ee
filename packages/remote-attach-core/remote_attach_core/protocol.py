"""Shared constants and type aliases for the remote-attach shim.

Everything a host or a test might want to tune lives here: the adapter
identifier the descriptor is expected to carry, the default adapter
binary, the placeholder tokens recognised during variable expansion,
and the lldb command templates used when synthesising attach and
source-map commands.
"""

from __future__ import annotations

import os
from typing import Any

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

DebugDescriptor = dict[str, Any]
"""A user-authored debug-session definition (one ``debug.json`` entry)."""

AdapterConfiguration = dict[str, Any]
"""The transformed configuration handed to the adapter."""

# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------

ADAPTER_ID: str = "lldb-remote-attach"
"""Value expected in the descriptor's ``adapter`` / ``adapterId`` field."""

DEFAULT_ADAPTER_BINARY: str = "lldb-dap-20"
"""Adapter executable looked up on ``PATH`` (``lldb-dap`` if symlinked)."""

ADAPTER_BINARY_ENV: str = "LLDB_REMOTE_ATTACH_ADAPTER"
"""Environment variable that overrides :data:`DEFAULT_ADAPTER_BINARY`."""

REQUEST_ATTACH: str = "attach"
REQUEST_LAUNCH: str = "launch"

# Keys that only mean something to the host; never forwarded to lldb-dap.
HOST_ONLY_KEYS: frozenset[str] = frozenset({"adapter", "adapterId", "label", "env"})

# ---------------------------------------------------------------------------
# Variable expansion
# ---------------------------------------------------------------------------

VAR_WORKTREE_ROOT = "ZED_WORKTREE_ROOT"
VAR_HOME = "HOME"
VAR_USER = "USER"

# ---------------------------------------------------------------------------
# lldb command templates
# ---------------------------------------------------------------------------

CMD_TARGET_CREATE = "target create {program}"
CMD_GDB_REMOTE = "gdb-remote {address}"
CMD_SOURCE_MAP = "settings set target.source-map {remote} {local}"

# ---------------------------------------------------------------------------
# Session persistence
# ---------------------------------------------------------------------------

SESSION_FILE: str = ".remote_attach_session.json"
"""Where the CLI keeps the classified descriptor between invocations."""


def default_adapter_binary() -> str:
    """Return the adapter binary name, honouring :data:`ADAPTER_BINARY_ENV`."""
    return os.environ.get(ADAPTER_BINARY_ENV) or DEFAULT_ADAPTER_BINARY
