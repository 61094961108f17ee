import pytest

from remote_attach_core.adapters.base import AdapterNotFoundError
from remote_attach_core.adapters.lldb import LldbDapAdapter
from remote_attach_core.invocation import build_invocation, env_overrides


def test_build_invocation_tcp_attach(adapter, tcp_descriptor):
    tcp_descriptor["env"] = {"DEBUGINFOD_URLS": "https://debuginfod.example"}
    invocation = build_invocation(adapter, tcp_descriptor, "attach", home="/home/alice")

    assert invocation.command == "/usr/bin/lldb-dap-20"
    assert invocation.arguments == []
    assert invocation.cwd is None
    assert invocation.request == "attach"
    assert invocation.env == {"DEBUGINFOD_URLS": "https://debuginfod.example"}
    assert invocation.configuration["attachCommands"][1] == "gdb-remote 127.0.0.1:2345"


def test_to_dict_shape(adapter, tcp_descriptor):
    data = build_invocation(adapter, tcp_descriptor, "attach").to_dict()
    assert data["command"] == "/usr/bin/lldb-dap-20"
    assert data["arguments"] == []
    assert data["envs"] == {}
    assert data["request_args"]["request"] == "attach"
    assert data["request_args"]["configuration"]["stopOnEntry"] is True


def test_env_overrides_verbatim_and_json_for_non_strings():
    descriptor = {"env": {"A": "1", "B": 2, "C": True, "D": ""}}
    assert env_overrides(descriptor) == {"A": "1", "B": "2", "C": "true", "D": ""}
    assert env_overrides({}) == {}
    assert env_overrides({"env": ["not", "a", "map"]}) == {}


def test_spawn_env_is_superset(adapter):
    invocation = build_invocation(adapter, {"env": {"A": "new", "B": "b"}}, "launch")
    merged = invocation.spawn_env({"A": "old", "PATH": "/usr/bin"})
    assert merged == {"A": "new", "B": "b", "PATH": "/usr/bin"}


def test_missing_adapter_produces_no_invocation(tcp_descriptor):
    adapter = LldbDapAdapter(which=lambda name: None)
    with pytest.raises(AdapterNotFoundError):
        build_invocation(adapter, tcp_descriptor, "attach")


def test_user_adapter_path_preferred(adapter, tcp_descriptor):
    invocation = build_invocation(
        adapter, tcp_descriptor, "attach", user_adapter_path="/opt/llvm/bin/lldb-dap"
    )
    assert invocation.command == "/opt/llvm/bin/lldb-dap"
