"""Per-session context pairing the classify and invoke calls.

``SessionContext`` is the single entry-point consumed by both:

* **MCP server** -- keeps the context in memory (long-running process).
* **Skill scripts** -- persist the classified descriptor to a JSON file
  so that the ``classify`` and ``invoke`` CLI invocations, which run as
  separate processes, still see the same descriptor.

The host calls :meth:`SessionContext.classify` and then
:meth:`SessionContext.build_invocation`, once each per debug session.
The retained descriptor is a single last-writer-wins slot.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from typing import Any

from remote_attach_core.adapters.base import DebugAdapter
from remote_attach_core.adapters.lldb import LldbDapAdapter
from remote_attach_core.invocation import AdapterInvocation, build_invocation
from remote_attach_core.protocol import (
    REQUEST_ATTACH,
    REQUEST_LAUNCH,
    SESSION_FILE,
    DebugDescriptor,
)

logger = logging.getLogger(__name__)

_KNOWN_REQUESTS = {REQUEST_ATTACH, REQUEST_LAUNCH}


def classify_request(descriptor: DebugDescriptor) -> str:
    """Return ``attach`` or ``launch``.

    A missing ``request`` means attach; anything unrecognised is launch.
    """
    request = descriptor.get("request")
    if request is None:
        return REQUEST_ATTACH
    if isinstance(request, str) and request in _KNOWN_REQUESTS:
        return request
    logger.warning("Unrecognised request %r; treating as launch", request)
    return REQUEST_LAUNCH


# ---------------------------------------------------------------------------
# SessionContext
# ---------------------------------------------------------------------------


class SessionContext:
    """Holds the descriptor between classification and invocation.

    Usage (in-memory)::

        ctx = SessionContext()
        kind = ctx.classify(descriptor)
        invocation = ctx.build_invocation(worktree_root="/home/me/proj")

    Usage (file-based, e.g. from skill scripts)::

        ctx = SessionContext.from_file_or_new()
        ctx.classify(descriptor)          # first process
        ...
        ctx = SessionContext.from_file_or_new()
        ctx.build_invocation(...)         # second process
    """

    def __init__(self, adapter: DebugAdapter | None = None) -> None:
        self._adapter = adapter or LldbDapAdapter()
        self._descriptor: DebugDescriptor | None = None
        self._request: str | None = None
        self._persist_file: str | None = None

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_file_or_new(
        cls,
        adapter: DebugAdapter | None = None,
        session_file: str = SESSION_FILE,
    ) -> SessionContext:
        """Restore a context from a JSON file, or create a fresh one."""
        ctx = cls(adapter)
        ctx._persist_file = os.path.abspath(session_file)

        if os.path.isfile(ctx._persist_file):
            try:
                with open(ctx._persist_file, encoding="utf-8") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Failed to restore session file: %s", exc)
                return ctx

            if not isinstance(data, dict):
                logger.warning(
                    "Ignoring session file %s: not a JSON object", ctx._persist_file
                )
                return ctx

            descriptor = data.get("descriptor")
            if isinstance(descriptor, dict):
                ctx._descriptor = descriptor
                request = data.get("request")
                if request not in (REQUEST_ATTACH, REQUEST_LAUNCH):
                    request = classify_request(descriptor)
                ctx._request = request
            logger.info("Restored session from %s", ctx._persist_file)

        return ctx

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def adapter(self) -> DebugAdapter:
        return self._adapter

    @property
    def descriptor(self) -> DebugDescriptor | None:
        return copy.deepcopy(self._descriptor)

    @property
    def request(self) -> str | None:
        return self._request

    # ------------------------------------------------------------------
    # Host calls
    # ------------------------------------------------------------------

    def classify(self, descriptor: DebugDescriptor) -> str:
        """Record *descriptor* and return its session kind."""
        adapter_name = descriptor.get("adapter", descriptor.get("adapterId"))
        if adapter_name is not None and adapter_name != self._adapter.adapter_id:
            logger.warning(
                "Descriptor names adapter %r, expected %r",
                adapter_name,
                self._adapter.adapter_id,
            )

        self._descriptor = copy.deepcopy(descriptor)
        self._request = classify_request(descriptor)
        self._save()
        return self._request

    def build_invocation(
        self,
        worktree_root: str | None = None,
        home: str | None = None,
        user_adapter_path: str | None = None,
    ) -> AdapterInvocation:
        """Build the adapter invocation for the last classified descriptor.

        Raises ``AdapterNotFoundError`` if the adapter binary is missing.
        """
        descriptor = self._descriptor
        if descriptor is None:
            logger.warning("No descriptor classified yet; using an empty one")
            descriptor = {}
        request = self._request or classify_request(descriptor)

        return build_invocation(
            self._adapter,
            descriptor,
            request,
            worktree_root=worktree_root,
            home=home,
            user_adapter_path=user_adapter_path,
        )

    def reset(self) -> None:
        """Forget the retained descriptor (and its file, if any)."""
        self._descriptor = None
        self._request = None
        self._delete_session_file()

    # ------------------------------------------------------------------
    # Persistence (file-based state for skill scripts)
    # ------------------------------------------------------------------

    def _save(self) -> None:
        if not self._persist_file:
            return
        data: dict[str, Any] = {
            "request": self._request,
            "descriptor": self._descriptor,
        }
        try:
            with open(self._persist_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError:
            logger.warning("Could not save session file %s", self._persist_file)

    def _delete_session_file(self) -> None:
        if self._persist_file and os.path.isfile(self._persist_file):
            try:
                os.remove(self._persist_file)
            except OSError:
                logger.warning("Could not remove session file %s", self._persist_file)
