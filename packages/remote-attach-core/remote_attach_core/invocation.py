"""Build the value a host needs to start the debug adapter.

:func:`build_invocation` is pure: it reads the descriptor, never
writes to it, and only touches the outside world through the adapter's
binary lookup.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from remote_attach_core.adapters.base import DebugAdapter
from remote_attach_core.protocol import AdapterConfiguration, DebugDescriptor
from remote_attach_core.variables import build_variables

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdapterInvocation:
    """Executable, arguments, environment and configuration for one session."""

    command: str
    request: str
    configuration: AdapterConfiguration
    arguments: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    cwd: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": self.command,
            "arguments": list(self.arguments),
            "cwd": self.cwd,
            "envs": dict(self.env),
            "request_args": {
                "request": self.request,
                "configuration": self.configuration,
            },
        }

    def spawn_env(self, base: Mapping[str, str]) -> dict[str, str]:
        """*base* with the descriptor's ``env`` laid over it."""
        merged = dict(base)
        merged.update(self.env)
        return merged


def env_overrides(descriptor: DebugDescriptor) -> dict[str, str]:
    """Copy ``env`` verbatim; non-string values are JSON encoded."""
    raw = descriptor.get("env")
    if not isinstance(raw, dict):
        return {}
    return {
        str(key): value if isinstance(value, str) else json.dumps(value)
        for key, value in raw.items()
    }


def build_invocation(
    adapter: DebugAdapter,
    descriptor: DebugDescriptor,
    request: str,
    worktree_root: str | None = None,
    home: str | None = None,
    user_adapter_path: str | None = None,
) -> AdapterInvocation:
    """Turn a classified descriptor into an :class:`AdapterInvocation`.

    Only executable resolution can fail (``AdapterNotFoundError``); any
    other oddity in the descriptor degrades to a pass-through.
    """
    executable = adapter.resolve_executable(user_adapter_path)
    command, *arguments = adapter.get_spawn_command(executable)

    variables = build_variables(worktree_root, home)
    configuration = adapter.build_configuration(descriptor, request, variables)
    logger.info("Adapter %s (%s): %s", adapter.adapter_id, request, command)

    return AdapterInvocation(
        command=command,
        request=request,
        configuration=configuration,
        arguments=arguments,
        env=env_overrides(descriptor),
    )
