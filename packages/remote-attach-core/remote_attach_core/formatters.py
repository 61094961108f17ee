"""Human-readable rendering of an :class:`AdapterInvocation`.

Plain text, no ANSI codes: it ends up in a terminal or in an MCP tool
result, and mostly answers "what exactly will lldb-dap be told?".
"""

from __future__ import annotations

import json
import shlex
from typing import Any

from remote_attach_core.invocation import AdapterInvocation

_COMMAND_KEYS = ("initCommands", "attachCommands")


def format_command_line(invocation: AdapterInvocation) -> str:
    """``lldb-dap-20 --flag`` as a shell would see it."""
    return shlex.join([invocation.command, *invocation.arguments])


def format_commands(title: str, commands: list[str]) -> str:
    """Numbered list of lldb commands under *title*."""
    if not commands:
        return f"{title}: (none)"
    lines = [f"{title}:"]
    for i, command in enumerate(commands):
        lines.append(f"  {i + 1:>2}. {command}")
    return "\n".join(lines)


def format_invocation(invocation: AdapterInvocation) -> str:
    """Summarise command, env, commands and remaining fields.

    Example output::

        Adapter: /usr/bin/lldb-dap-20  (attach)
        Environment:
          DEBUGINFOD_URLS=https://debuginfod.example
        initCommands:
           1. settings set target.source-map /build /home/me/src
        attachCommands:
           1. target create /home/me/src/out/app
           2. gdb-remote 10.0.0.5:2345
        Other fields:
          stopOnEntry = true
    """
    config = invocation.configuration
    parts = [f"Adapter: {format_command_line(invocation)}  ({invocation.request})"]

    if invocation.env:
        parts.append("Environment:")
        parts.extend(f"  {key}={value}" for key, value in sorted(invocation.env.items()))

    for key in _COMMAND_KEYS:
        value = config.get(key)
        parts.append(format_commands(key, value if isinstance(value, list) else []))

    others = {k: v for k, v in config.items() if k not in _COMMAND_KEYS}
    if others:
        parts.append("Other fields:")
        parts.extend(f"  {key} = {_render(value)}" for key, value in others.items())

    return "\n".join(parts)


def _render(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)
