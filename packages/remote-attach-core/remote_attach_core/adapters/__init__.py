"""Debug adapter implementations.

Only ``lldb-dap`` is driven today, via ``LldbDapAdapter``: remote attach
is expressed as ``target create`` + ``gdb-remote`` attach commands.
"""

from remote_attach_core.adapters.base import AdapterNotFoundError, DebugAdapter
from remote_attach_core.adapters.lldb import LldbDapAdapter

__all__ = ["AdapterNotFoundError", "DebugAdapter", "LldbDapAdapter"]
