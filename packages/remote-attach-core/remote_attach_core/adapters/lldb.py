"""lldb-dap adapter driven through ``gdb-remote`` for remote attach.

lldb-dap ships with LLVM and speaks DAP over stdin/stdout.  It has no
notion of "attach to tcp://HOST:PORT"; instead the session is expressed
as lldb commands run during ``attach``::

    target create /path/to/local/binary     # symbols first
    gdb-remote HOST:PORT                    # then the remote stub
    <user attachCommands...>

Source paths recorded on the build machine are mapped back to the local
checkout with ``settings set target.source-map REMOTE LOCAL`` appended
to ``initCommands``.

Install:  apt install lldb-20   (provides ``lldb-dap-20``)
"""

from __future__ import annotations

import copy
import logging
import re
from typing import Any

from remote_attach_core.adapters.base import BinaryLookup, DebugAdapter
from remote_attach_core.protocol import (
    ADAPTER_ID,
    CMD_GDB_REMOTE,
    CMD_SOURCE_MAP,
    CMD_TARGET_CREATE,
    HOST_ONLY_KEYS,
    REQUEST_ATTACH,
    AdapterConfiguration,
    DebugDescriptor,
    default_adapter_binary,
)
from remote_attach_core.variables import expand_variables

logger = logging.getLogger(__name__)

# tcp://HOST:PORT, HOST may be a bracketed IPv6 literal.
_TCP_TARGET_RE = re.compile(
    r"tcp://(?P<host>\[[^\]\s]+\]|[^\s:/\[\]]+):(?P<port>[0-9]+)"
)

_NEEDS_QUOTING_RE = re.compile(r"[\s\"']")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_tcp_target(target: Any) -> str | None:
    """Return ``HOST:PORT`` for a ``tcp://HOST:PORT`` target, else ``None``."""
    if not isinstance(target, str):
        return None
    match = _TCP_TARGET_RE.fullmatch(target)
    if match is None:
        return None
    return f"{match.group('host')}:{match.group('port')}"


def quote_arg(arg: str) -> str:
    """Quote an lldb command argument only when lldb would split it."""
    if arg and not _NEEDS_QUOTING_RE.search(arg):
        return arg
    escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _expand_mappings(mappings: Any, variables: dict[str, str]) -> Any:
    if not isinstance(mappings, list):
        return mappings
    expanded = []
    for mapping in mappings:
        if isinstance(mapping, dict):
            mapping = dict(mapping)
            for key in ("localRoot", "remoteRoot"):
                if isinstance(mapping.get(key), str):
                    mapping[key] = expand_variables(mapping[key], variables)
        expanded.append(mapping)
    return expanded


def source_map_commands(mappings: Any) -> list[str]:
    """One ``target.source-map`` command per complete mapping, remote first."""
    commands: list[str] = []
    if not isinstance(mappings, list):
        return commands
    for mapping in mappings:
        if not isinstance(mapping, dict):
            continue
        remote = mapping.get("remoteRoot")
        local = mapping.get("localRoot")
        if isinstance(remote, str) and isinstance(local, str):
            commands.append(
                CMD_SOURCE_MAP.format(remote=quote_arg(remote), local=quote_arg(local))
            )
        else:
            logger.warning("Skipping incomplete pathMapping: %r", mapping)
    return commands


# ---------------------------------------------------------------------------
# Adapter class
# ---------------------------------------------------------------------------


class LldbDapAdapter(DebugAdapter):
    """Rewrites remote-attach descriptors for an unmodified ``lldb-dap``."""

    def __init__(
        self,
        binary: str | None = None,
        which: BinaryLookup | None = None,
        adapter_id: str = ADAPTER_ID,
    ) -> None:
        super().__init__(binary or default_adapter_binary(), which)
        self._adapter_id = adapter_id

    @property
    def adapter_id(self) -> str:
        return self._adapter_id

    def build_configuration(
        self,
        descriptor: DebugDescriptor,
        request: str,
        variables: dict[str, str],
    ) -> AdapterConfiguration:
        config: AdapterConfiguration = {
            key: copy.deepcopy(value)
            for key, value in descriptor.items()
            if key not in HOST_ONLY_KEYS
        }
        if isinstance(config.get("program"), str):
            config["program"] = expand_variables(config["program"], variables)
        if "pathMappings" in config:
            config["pathMappings"] = _expand_mappings(config["pathMappings"], variables)

        if request != REQUEST_ATTACH:
            return config

        address = parse_tcp_target(descriptor.get("target"))
        if address is None:
            logger.warning(
                "target %r is not tcp://HOST:PORT; passing configuration through",
                descriptor.get("target"),
            )
            return config

        # lldb-dap must not load the program itself: symbols have to be in
        # place before gdb-remote connects, so it goes into attachCommands.
        program = config.pop("program", None)
        config.pop("target", None)

        attach_commands: list[str] = []
        if isinstance(program, str) and program:
            attach_commands.append(CMD_TARGET_CREATE.format(program=quote_arg(program)))
        attach_commands.append(CMD_GDB_REMOTE.format(address=address))
        attach_commands.extend(_string_list(descriptor.get("attachCommands")))
        config["attachCommands"] = attach_commands

        init_commands = _string_list(descriptor.get("initCommands"))
        init_commands.extend(source_map_commands(config.get("pathMappings")))
        if init_commands:
            config["initCommands"] = init_commands
        else:
            config.pop("initCommands", None)

        config["request"] = REQUEST_ATTACH
        return config
