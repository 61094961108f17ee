import sys

from remote_attach_core.invocation import AdapterInvocation
from remote_attach_core.launcher import run_adapter


async def test_run_adapter_returns_exit_code_and_passes_env():
    invocation = AdapterInvocation(
        command=sys.executable,
        arguments=["-c", "import os, sys; sys.exit(int(os.environ['EXIT_WITH']))"],
        request="attach",
        configuration={},
        env={"EXIT_WITH": "7"},
    )
    assert await run_adapter(invocation) == 7


async def test_run_adapter_keeps_base_env():
    invocation = AdapterInvocation(
        command=sys.executable,
        arguments=["-c", "import os, sys; sys.exit(0 if os.environ['KEEP'] == 'me' else 3)"],
        request="launch",
        configuration={},
    )
    assert await run_adapter(invocation, base_env={"KEEP": "me"}) == 0
