"""Hand control to the debug adapter.

Once the invocation is built there is nothing left for this process to
do except start the adapter with the editor's stdio attached and step
aside: all DAP traffic flows directly between editor and adapter.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Mapping

from remote_attach_core.invocation import AdapterInvocation

logger = logging.getLogger(__name__)


async def run_adapter(
    invocation: AdapterInvocation,
    base_env: Mapping[str, str] | None = None,
) -> int:
    """Spawn the adapter with inherited stdio and return its exit code.

    The adapter environment is *base_env* (default: this process's
    environment) with the descriptor's ``env`` laid over it.
    """
    env = invocation.spawn_env(os.environ if base_env is None else base_env)
    cmd = [invocation.command, *invocation.arguments]
    logger.info("Spawning adapter: %s", " ".join(cmd))

    process = await asyncio.create_subprocess_exec(
        *cmd,
        cwd=invocation.cwd,
        env=env,
    )
    returncode = await process.wait()
    logger.info("Adapter exited with %d", returncode)
    return returncode
