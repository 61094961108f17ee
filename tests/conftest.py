from __future__ import annotations

import pytest

from remote_attach_core.adapters.lldb import LldbDapAdapter

FAKE_ADAPTER_PATH = "/usr/bin/lldb-dap-20"


def fake_which(name: str) -> str | None:
    if name == "lldb-dap-20":
        return FAKE_ADAPTER_PATH
    if name.startswith("/"):
        return name
    return None


@pytest.fixture
def adapter() -> LldbDapAdapter:
    return LldbDapAdapter(binary="lldb-dap-20", which=fake_which)


@pytest.fixture
def tcp_descriptor() -> dict:
    return {
        "adapter": "lldb-remote-attach",
        "label": "Attach to board",
        "request": "attach",
        "target": "tcp://127.0.0.1:2345",
        "program": "/bin/app",
        "attachCommands": ["continue"],
        "stopOnEntry": True,
    }
