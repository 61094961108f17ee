"""
MCP server that exposes the remote-attach transform as tools.

Thin layer on top of ``remote_attach_core.session.SessionContext``.
All of the rewriting (variable expansion, attach/source-map command
synthesis, adapter lookup) lives in the shared ``remote-attach-core``
package.

Run::

    python -m remote_attach_mcp.server          # stdio transport
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Awaitable

import mcp.server.stdio
from mcp import types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from remote_attach_core.adapters.base import AdapterNotFoundError
from remote_attach_core.formatters import format_invocation
from remote_attach_core.invocation import AdapterInvocation
from remote_attach_core.session import SessionContext

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

# Each strategy is an async callable: (context, args) -> str
ToolStrategy = Callable[[SessionContext, dict[str, Any]], Awaitable[str]]

# ---------------------------------------------------------------------------
# Server + shared context
# ---------------------------------------------------------------------------

server = Server("remote-attach-mcp")
_context = SessionContext()

# ---------------------------------------------------------------------------
# Tool strategies
# ---------------------------------------------------------------------------


def _invocation(context: SessionContext, args: dict[str, Any]) -> AdapterInvocation:
    return context.build_invocation(
        worktree_root=args.get("worktree_root"),
        home=args.get("home"),
        user_adapter_path=args.get("adapter_path"),
    )


async def _classify(context: SessionContext, args: dict[str, Any]) -> str:
    descriptor = args.get("descriptor")
    if not isinstance(descriptor, dict):
        return "Error: descriptor must be a JSON object."
    return context.classify(descriptor)


async def _build(context: SessionContext, args: dict[str, Any]) -> str:
    try:
        invocation = _invocation(context, args)
    except AdapterNotFoundError as exc:
        return f"Error: {exc}"
    return json.dumps(invocation.to_dict(), indent=2)


async def _describe(context: SessionContext, args: dict[str, Any]) -> str:
    try:
        invocation = _invocation(context, args)
    except AdapterNotFoundError as exc:
        return f"Error: {exc}"
    return format_invocation(invocation)


async def _reset(context: SessionContext, args: dict[str, Any]) -> str:
    context.reset()
    return "Session context cleared."


_HOST_PROPERTIES: dict[str, Any] = {
    "worktree_root": {
        "type": "string",
        "description": "Project root substituted for ${ZED_WORKTREE_ROOT}.",
    },
    "home": {
        "type": "string",
        "description": "Home directory substituted for ${HOME}; ${USER} is its last segment.",
    },
    "adapter_path": {
        "type": "string",
        "description": "Explicit lldb-dap executable, overriding the PATH lookup.",
    },
}

# ---------------------------------------------------------------------------
# Registry: tool name -> (Tool schema, strategy)
# ---------------------------------------------------------------------------

_TOOL_REGISTRY: dict[str, tuple[types.Tool, ToolStrategy]] = {
    "attach_classify": (
        types.Tool(
            name="attach_classify",
            description=(
                "Record a debug descriptor (one .zed/debug.json entry) and "
                "return whether it is an 'attach' or 'launch' session."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "descriptor": {
                        "type": "object",
                        "description": "The debug descriptor, e.g. {request, target, program, pathMappings}.",
                    },
                },
                "required": ["descriptor"],
            },
        ),
        _classify,
    ),
    "attach_invocation": (
        types.Tool(
            name="attach_invocation",
            description=(
                "Build the lldb-dap command, environment and transformed "
                "configuration for the last classified descriptor, as JSON."
            ),
            inputSchema={"type": "object", "properties": _HOST_PROPERTIES},
        ),
        _build,
    ),
    "attach_describe": (
        types.Tool(
            name="attach_describe",
            description="Same as attach_invocation, rendered as readable text.",
            inputSchema={"type": "object", "properties": _HOST_PROPERTIES},
        ),
        _describe,
    ),
    "attach_reset": (
        types.Tool(
            name="attach_reset",
            description="Forget the last classified descriptor.",
            inputSchema={"type": "object", "properties": {}},
        ),
        _reset,
    ),
}


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


@server.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    return [schema for schema, _ in _TOOL_REGISTRY.values()]


@server.call_tool()
async def handle_call_tool(
    name: str, arguments: dict[str, Any]
) -> list[types.TextContent]:
    entry = _TOOL_REGISTRY.get(name)
    if entry is None:
        return [types.TextContent(type="text", text=f"Unknown tool: {name}")]

    _schema, strategy = entry
    text = await strategy(_context, arguments or {})
    return [types.TextContent(type="text", text=text)]


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------


async def run() -> None:
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name="remote-attach-mcp",
                server_version="0.1.0",
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
