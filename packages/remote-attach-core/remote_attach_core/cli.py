"""Command-line host for the remote-attach shim.

Each invocation is a separate process; the classified descriptor is
persisted to ``.remote_attach_session.json`` between calls.

Usage::

    lldb-remote-attach classify .zed/debug.json [--index N | --label NAME]
    lldb-remote-attach invoke   [--worktree DIR] [--home DIR]
    lldb-remote-attach describe
    lldb-remote-attach exec     [DESCRIPTOR] [--config-out FILE]  # hand off to lldb-dap
    lldb-remote-attach reset

``invoke``, ``describe`` and ``exec`` also accept a descriptor file, in
which case they classify it first.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any

from remote_attach_core.adapters.base import AdapterNotFoundError
from remote_attach_core.adapters.lldb import LldbDapAdapter
from remote_attach_core.formatters import format_invocation
from remote_attach_core.invocation import AdapterInvocation
from remote_attach_core.launcher import run_adapter
from remote_attach_core.protocol import SESSION_FILE, DebugDescriptor
from remote_attach_core.session import SessionContext

logger = logging.getLogger(__name__)


class DescriptorError(ValueError):
    """The descriptor file is unreadable or has no matching entry."""


# ---------------------------------------------------------------------------
# Descriptor loading
# ---------------------------------------------------------------------------


def load_descriptor(
    path: str, index: int = 0, label: str | None = None
) -> DebugDescriptor:
    """Read one descriptor from *path*.

    The file holds either a single object or a list of them, as in
    ``.zed/debug.json``.  *label* wins over *index* when given.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data: Any = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise DescriptorError(f"cannot read {path}: {exc}") from exc

    if isinstance(data, dict):
        entries = [data]
    elif isinstance(data, list):
        entries = [entry for entry in data if isinstance(entry, dict)]
    else:
        raise DescriptorError(f"{path} holds neither an object nor a list")

    if label is not None:
        for entry in entries:
            if entry.get("label") == label:
                return entry
        raise DescriptorError(f"no entry labelled {label!r} in {path}")

    if not 0 <= index < len(entries):
        raise DescriptorError(f"{path} has no entry at index {index}")
    return entries[index]


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


def _maybe_classify(ctx: SessionContext, args: argparse.Namespace) -> None:
    if getattr(args, "descriptor", None):
        ctx.classify(load_descriptor(args.descriptor, args.index, args.label))


def _do_classify(ctx: SessionContext, args: argparse.Namespace) -> int:
    _maybe_classify(ctx, args)
    print(ctx.request)
    return 0


def _build(ctx: SessionContext, args: argparse.Namespace) -> AdapterInvocation:
    _maybe_classify(ctx, args)
    return ctx.build_invocation(
        worktree_root=args.worktree,
        home=args.home,
        user_adapter_path=args.adapter_path,
    )


def _do_invoke(ctx: SessionContext, args: argparse.Namespace) -> int:
    print(json.dumps(_build(ctx, args).to_dict(), indent=2))
    return 0


def _do_describe(ctx: SessionContext, args: argparse.Namespace) -> int:
    print(format_invocation(_build(ctx, args)))
    return 0


def _write_request_args(invocation: AdapterInvocation, path: str | None) -> None:
    """Hand the rewritten configuration to the host before the adapter starts.

    Written to *path* when given, otherwise as one JSON line on stderr
    (stdout belongs to the adapter).
    """
    payload = json.dumps(invocation.to_dict()["request_args"])
    if path is None:
        print(payload, file=sys.stderr, flush=True)
        return
    with open(path, "w", encoding="utf-8") as f:
        f.write(payload + "\n")


def _do_exec(ctx: SessionContext, args: argparse.Namespace) -> int:
    invocation = _build(ctx, args)
    _write_request_args(invocation, args.config_out)
    return asyncio.run(run_adapter(invocation))


def _do_reset(ctx: SessionContext, _args: argparse.Namespace) -> int:
    ctx.reset()
    return 0


_ACTION_TABLE = {
    "classify": _do_classify,
    "invoke": _do_invoke,
    "describe": _do_describe,
    "exec": _do_exec,
    "reset": _do_reset,
}


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lldb-remote-attach",
        description="Rewrite a tcp:// remote-attach descriptor for lldb-dap.",
    )
    parser.add_argument("--session-file", default=SESSION_FILE)
    parser.add_argument("--adapter-binary", default=None,
                        help="adapter executable name (default: lldb-dap-20)")
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="action", required=True)
    for name in _ACTION_TABLE:
        action = sub.add_parser(name)
        if name == "reset":
            continue
        action.add_argument("descriptor", nargs=None if name == "classify" else "?")
        action.add_argument("--index", type=int, default=0)
        action.add_argument("--label", default=None)
        if name == "classify":
            continue
        action.add_argument("--worktree", default=os.getcwd())
        action.add_argument("--home", default=os.environ.get("HOME"))
        action.add_argument("--adapter-path", default=None)
        if name == "exec":
            action.add_argument(
                "--config-out", default=None,
                help="write the adapter's request arguments here (default: stderr)",
            )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    # stdout is the DAP channel for ``exec``; logs go to stderr.
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING, stream=sys.stderr
    )

    ctx = SessionContext.from_file_or_new(
        adapter=LldbDapAdapter(binary=args.adapter_binary),
        session_file=args.session_file,
    )
    try:
        return _ACTION_TABLE[args.action](ctx, args)
    except (AdapterNotFoundError, DescriptorError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
