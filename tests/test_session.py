import json
import logging

import pytest

from remote_attach_core.adapters.base import AdapterNotFoundError
from remote_attach_core.adapters.lldb import LldbDapAdapter
from remote_attach_core.session import SessionContext, classify_request


@pytest.mark.parametrize(
    "request_value, expected",
    [
        ("attach", "attach"),
        ("launch", "launch"),
        ("bogus", "launch"),
        (["attach"], "launch"),
        ({}, "launch"),
        (7, "launch"),
    ],
)
def test_classify_request(request_value, expected):
    assert classify_request({"request": request_value}) == expected


def test_missing_request_means_attach(adapter):
    assert classify_request({}) == "attach"
    assert classify_request({"request": None}) == "attach"
    assert SessionContext(adapter).classify({"request": ["attach"]}) == "launch"


def test_classify_retains_a_copy(adapter, tcp_descriptor):
    ctx = SessionContext(adapter)
    assert ctx.classify(tcp_descriptor) == "attach"
    tcp_descriptor["target"] = "tcp://changed:1"
    assert ctx.descriptor["target"] == "tcp://127.0.0.1:2345"


def test_last_classification_wins(adapter, tcp_descriptor):
    ctx = SessionContext(adapter)
    ctx.classify({"request": "launch", "program": "/bin/other"})
    ctx.classify(tcp_descriptor)
    invocation = ctx.build_invocation()
    assert invocation.request == "attach"
    assert invocation.configuration["attachCommands"][0] == "target create /bin/app"


def test_adapter_mismatch_only_warns(adapter, caplog):
    ctx = SessionContext(adapter)
    with caplog.at_level(logging.WARNING):
        assert ctx.classify({"adapter": "CodeLLDB", "request": "attach"}) == "attach"
    assert "CodeLLDB" in caplog.text


def test_build_without_classify_is_pass_through(adapter):
    invocation = SessionContext(adapter).build_invocation()
    assert invocation.request == "attach"
    assert invocation.configuration == {}


def test_build_propagates_adapter_not_found(tcp_descriptor):
    ctx = SessionContext(LldbDapAdapter(which=lambda name: None))
    ctx.classify(tcp_descriptor)
    with pytest.raises(AdapterNotFoundError):
        ctx.build_invocation()


def test_file_backed_context_pairs_separate_processes(adapter, tcp_descriptor, tmp_path):
    session_file = str(tmp_path / "session.json")

    first = SessionContext.from_file_or_new(adapter, session_file=session_file)
    first.classify(tcp_descriptor)
    with open(session_file, encoding="utf-8") as f:
        assert json.load(f)["request"] == "attach"

    second = SessionContext.from_file_or_new(adapter, session_file=session_file)
    assert second.request == "attach"
    invocation = second.build_invocation(home="/home/alice")
    assert invocation.configuration["attachCommands"][1] == "gdb-remote 127.0.0.1:2345"

    second.reset()
    assert not (tmp_path / "session.json").exists()
    assert second.descriptor is None


def test_corrupt_session_file_starts_fresh(adapter, tmp_path):
    session_file = tmp_path / "session.json"
    session_file.write_text("{not json")
    ctx = SessionContext.from_file_or_new(adapter, session_file=str(session_file))
    assert ctx.descriptor is None
    assert ctx.request is None


def test_non_object_session_file_starts_fresh(adapter, tmp_path):
    session_file = tmp_path / "session.json"
    session_file.write_text('[{"request": "attach"}]')
    ctx = SessionContext.from_file_or_new(adapter, session_file=str(session_file))
    assert ctx.descriptor is None
    assert ctx.request is None
    assert ctx.classify({"request": "launch"}) == "launch"
