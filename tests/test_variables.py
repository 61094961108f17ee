from remote_attach_core.variables import (
    build_variables,
    expand_variables,
    infer_home,
    user_from_home,
)


def test_user_is_last_segment_of_home():
    assert user_from_home("/home/alice") == "alice"
    assert user_from_home("/Users/bob/") == "bob"
    assert user_from_home(None) is None


def test_expand_all_tokens():
    table = build_variables(worktree_root="/work/proj", home="/home/alice")
    assert expand_variables("${ZED_WORKTREE_ROOT}/build", table) == "/work/proj/build"
    assert expand_variables("${HOME}/src", table) == "/home/alice/src"
    assert expand_variables("/srv/${USER}/app", table) == "/srv/alice/app"


def test_bare_tokens_expand_on_word_boundary_only():
    table = build_variables(home="/home/alice")
    assert expand_variables("$HOME/src", table) == "/home/alice/src"
    assert expand_variables("$USER-build", table) == "alice-build"
    # $HOMEDIR is a different variable and stays as is.
    assert expand_variables("$HOMEDIR/x", table) == "$HOMEDIR/x"


def test_unresolved_tokens_left_verbatim():
    table = build_variables()
    assert table == {}
    assert expand_variables("${HOME}/x/${USER}", table) == "${HOME}/x/${USER}"
    assert expand_variables("${PATH}", build_variables(home="/home/a")) == "${PATH}"


def test_expansion_is_idempotent():
    table = build_variables(worktree_root="/w", home="/home/alice")
    once = expand_variables("${ZED_WORKTREE_ROOT}/${USER}", table)
    assert expand_variables(once, table) == once
    assert expand_variables("/plain/path", table) == "/plain/path"


def test_home_inferred_from_worktree_when_host_gives_none():
    assert infer_home("/home/john/projects/fw") == "/home/john"
    assert infer_home("/opt/src") is None
    table = build_variables(worktree_root="/home/john/projects/fw")
    assert table["HOME"] == "/home/john"
    assert table["USER"] == "john"


def test_host_home_wins_over_inferred():
    table = build_variables(worktree_root="/home/john/p", home="/home/alice")
    assert table["USER"] == "alice"
