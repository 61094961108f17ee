"""MCP front-end for the remote-attach shim."""
