#!/usr/bin/env python3
"""Remote-attach shim CLI for agent skills.

Thin router that delegates all work to ``remote_attach_core.cli``.
Each invocation is a separate process; the classified descriptor is
persisted to ``.remote_attach_session.json`` between calls.

Usage::

    python attach.py classify .zed/debug.json --label "Attach remote"
    python attach.py describe
    python attach.py invoke --worktree "$PWD"
    python attach.py exec
    python attach.py reset
"""

from __future__ import annotations

import sys

# Require lldb-remote-attach (provides remote_attach_core). Install globally or in env:
#   pip install lldb-remote-attach
try:
    from remote_attach_core.cli import main
except ModuleNotFoundError as e:
    if "remote_attach_core" in str(e) or e.name == "remote_attach_core":
        print(
            "Error: lldb-remote-attach is not installed. Install it first:\n"
            "  pip install lldb-remote-attach",
            file=sys.stderr,
        )
        sys.exit(1)
    raise


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
