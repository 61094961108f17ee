"""Rewrite remote-attach debug descriptors for an unmodified lldb-dap."""
