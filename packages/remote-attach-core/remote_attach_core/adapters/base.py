"""Abstract base for debug adapters."""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from typing import Callable

from remote_attach_core.protocol import AdapterConfiguration, DebugDescriptor

# Same signature as ``shutil.which`` for the parts we use.
BinaryLookup = Callable[[str], str | None]


class AdapterNotFoundError(FileNotFoundError):
    """The adapter executable could not be located on the search path."""

    def __init__(self, binary: str) -> None:
        self.binary = binary
        super().__init__(
            f"Cannot find debug adapter '{binary}' on PATH.  Install lldb-dap, "
            f"symlink it as '{binary}', or point the session at it explicitly."
        )


class DebugAdapter(ABC):
    """Base class for adapter-specific configuration rewriters.

    Each subclass knows how to:
    * Name the adapter binary it drives.
    * Build the command to spawn it.
    * Rewrite a user descriptor into the configuration the adapter expects.
    """

    def __init__(self, binary: str, which: BinaryLookup | None = None) -> None:
        self._binary = binary
        self._which = which or shutil.which

    @property
    @abstractmethod
    def adapter_id(self) -> str:
        """Identifier the user's descriptor refers to this adapter by."""

    @property
    def binary(self) -> str:
        return self._binary

    @abstractmethod
    def build_configuration(
        self,
        descriptor: DebugDescriptor,
        request: str,
        variables: dict[str, str],
    ) -> AdapterConfiguration:
        """Return the configuration dict handed to the adapter."""

    def get_spawn_command(self, executable: str) -> list[str]:
        """Return the command + args to start the adapter subprocess."""
        return [executable]

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def resolve_executable(self, user_path: str | None = None) -> str:
        """Locate the adapter binary, preferring an explicit *user_path*.

        Raises :class:`AdapterNotFoundError` when nothing is found; there
        is no retry, a missing binary needs the user to install it.
        """
        wanted = user_path or self._binary
        found = self._which(wanted)
        if not found:
            raise AdapterNotFoundError(wanted)
        return found
