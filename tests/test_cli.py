"""
Tests for the command line front end (tutel/cli.py).

Commands are run through main() with --dir pointing at a temp directory, so
nothing depends on the process working directory.
"""

import argparse

import pytest

from tutel.cli import build_selectors, main, parse_target
from tutel.codec import load
from tutel.config import PROJECT_FILE_NAME
from tutel.selector import Indexed, Named


# --- test fixtures ---

@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the nav registry at a temp dir and clear other settings."""
    data = tmp_path / "data"
    monkeypatch.setenv("TUTEL_DATA_DIR", str(data))
    for var in ("TUTEL_FILE_NAME", "TUTEL_MAX_DEPTH", "TUTEL_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return data


@pytest.fixture
def project(tmp_path, data_dir):
    """An empty project named 'proj'."""
    directory = tmp_path / "proj"
    directory.mkdir()
    main(["--dir", str(directory), "new", "proj"])
    return directory


def run(directory, *argv):
    main(["--dir", str(directory), *argv])


def tasks_of(directory):
    return [(t.desc, t.completed, t.index) for t in load(directory / PROJECT_FILE_NAME).tasks]


# ============================================================
# Argument helpers
# ============================================================

class TestParseTarget:
    def test_plain_index(self):
        assert parse_target("7") == 7

    def test_named(self):
        assert parse_target("api:3") == Named("api", 3)

    def test_prefix_with_colon(self):
        assert parse_target("a:b:3") == Named("a:b", 3)

    def test_not_a_number(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_target("abc")

    def test_out_of_range(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_target("1000")
        with pytest.raises(argparse.ArgumentTypeError):
            parse_target("-1")


def test_build_selectors():
    assert build_selectors([1, Named("x", 2), 3]) == [Indexed((1, 3)), Named("x", 2)]
    assert build_selectors([Named("x", 0)]) == [Named("x", 0)]


# ============================================================
# new
# ============================================================

def test_new_creates_and_registers(tmp_path, data_dir, capsys):
    directory = tmp_path / "site"
    directory.mkdir()
    run(directory, "new")

    assert load(directory / PROJECT_FILE_NAME).name == "site"
    assert "Created: site" in capsys.readouterr().out
    assert (data_dir / "tutelnav").read_text(encoding='utf-8') == f"site {directory.resolve()}\n"


def test_new_refuses_existing(project, capsys):
    with pytest.raises(SystemExit) as excinfo:
        run(project, "new", "again")
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.startswith("[tutel] a project already exists")


def test_new_child(project):
    child = project / "api"
    child.mkdir()
    run(child, "new", "api", "--child")
    assert load(child / PROJECT_FILE_NAME).is_child


# ============================================================
# add / done / rm / edit
# ============================================================

def test_add(project, capsys):
    run(project, "add", "Fix", "the", "bug")
    run(project, "a", "Already", "done", "--completed")

    assert tasks_of(project) == [("Fix the bug", False, 0), ("Already done", True, 1)]
    assert "Added: 000) [X]Fix the bug" in capsys.readouterr().out


def test_add_from_subdirectory(project):
    sub = project / "src" / "deep"
    sub.mkdir(parents=True)
    run(sub, "add", "From below")
    assert tasks_of(project) == [("From below", False, 0)]


def test_done(project):
    run(project, "add", "a")
    run(project, "add", "b")
    run(project, "done", "1")
    assert tasks_of(project) == [("a", False, 0), ("b", True, 1)]

    run(project, "d", "1", "--not")
    assert tasks_of(project) == [("a", False, 0), ("b", False, 1)]


def test_done_all(project):
    run(project, "add", "a")
    run(project, "add", "b")
    run(project, "done", "--all")
    assert all(completed for _, completed, _ in tasks_of(project))


def test_done_missing_index_saves_nothing(project, capsys):
    run(project, "add", "a")
    with pytest.raises(SystemExit) as excinfo:
        run(project, "done", "0", "5")
    assert excinfo.value.code == 1
    assert "[tutel] no task with index 5" in capsys.readouterr().err
    assert tasks_of(project) == [("a", False, 0)]


def test_done_requires_indices(project, capsys):
    with pytest.raises(SystemExit):
        run(project, "done")
    assert "one or more task indices are required" in capsys.readouterr().err


def test_done_in_child_by_name(project):
    child = project / "services" / "api"
    child.mkdir(parents=True)
    run(child, "new", "api", "--child")
    run(child, "add", "child task")

    # the child task is reachable from the root by name
    run(project, "done", "api:0")
    assert tasks_of(child) == [("child task", True, 0)]


def test_add_with_project_option(project):
    child = project / "api"
    child.mkdir()
    run(child, "new", "api", "--child")

    run(project, "add", "for api", "--project", "ap")
    assert tasks_of(child) == [("for api", False, 0)]
    assert tasks_of(project) == []


def test_unknown_project_prefix(project, capsys):
    with pytest.raises(SystemExit):
        run(project, "add", "x", "-p", "nothing")
    assert "[tutel] no project matching 'nothing'" in capsys.readouterr().err


def test_rm(project, capsys):
    for desc in ("a", "b", "c"):
        run(project, "add", desc)
    run(project, "rm", "0", "2")
    assert tasks_of(project) == [("b", False, 1)]
    assert "Removed 2 task(s)." in capsys.readouterr().out


def test_rm_cleanup(project):
    run(project, "add", "a", "-c")
    run(project, "add", "b")
    run(project, "add", "c", "-c")
    run(project, "rm", "--cleanup")
    assert tasks_of(project) == [("b", False, 1)]


def test_rm_all(project):
    run(project, "add", "a")
    run(project, "rm", "--all")
    assert tasks_of(project) == []


def test_rm_exclusive_modes(project, capsys):
    with pytest.raises(SystemExit):
        run(project, "rm", "0", "--all")
    assert "exclusive" in capsys.readouterr().err


def test_rm_delete_project(project):
    run(project, "rm", "--delete-project")
    assert not (project / PROJECT_FILE_NAME).exists()


def test_edit(project, capsys):
    run(project, "add", "tpyo")
    run(project, "e", "0", "typo", "fixed")
    assert tasks_of(project) == [("typo fixed", False, 0)]
    assert "Updated: 000) [X]typo fixed" in capsys.readouterr().out


def test_edit_missing(project, capsys):
    with pytest.raises(SystemExit):
        run(project, "edit", "3", "nothing")
    assert "[tutel] no task with index 3" in capsys.readouterr().err


# ============================================================
# show / nav / errors
# ============================================================

def test_show_tree(project, capsys):
    child = project / "docs"
    child.mkdir()
    run(child, "new", "docs", "--child")
    run(project, "add", "root task")
    run(child, "add", "doc task", "--completed")
    capsys.readouterr()

    run(project)
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "[X]proj",
        "000) [X]root task",
        "    [✓]docs",
        "    000) [✓]doc task",
    ]


def test_show_without_project(tmp_path, data_dir, capsys):
    empty = tmp_path / "empty"
    empty.mkdir()
    with pytest.raises(SystemExit) as excinfo:
        run(empty, "show")
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.strip() == "[tutel] no project found"


def test_nav(project, capsys):
    capsys.readouterr()
    main(["nav", "proj"])
    assert capsys.readouterr().out.strip() == str(project.resolve())


def test_nav_unknown(data_dir, capsys):
    with pytest.raises(SystemExit):
        main(["nav", "nothing"])
    assert "[tutel] no projects added yet" in capsys.readouterr().err


def test_invalid_index_is_usage_error(project):
    with pytest.raises(SystemExit) as excinfo:
        run(project, "done", "abc")
    assert excinfo.value.code == 2


# ============================================================
# Named targets from inside a child list
# ============================================================

@pytest.fixture
def siblings(project):
    """proj with child lists api/ and web/, each holding task 0."""
    for name in ("api", "web"):
        child = project / name
        child.mkdir()
        run(child, "new", name, "--child")
        run(child, "add", f"{name} task")
    return project / "api", project / "web"


def test_done_in_sibling_by_name(siblings):
    api, web = siblings
    run(web, "done", "api:0")
    assert tasks_of(api) == [("api task", True, 0)]
    assert tasks_of(web) == [("web task", False, 0)]


def test_rm_root_task_from_child(project, siblings):
    api, _ = siblings
    run(project, "add", "root task")
    run(api, "rm", "proj:0")
    assert tasks_of(project) == []
    assert tasks_of(api) == [("api task", False, 0)]


def test_edit_in_sibling_by_name(siblings):
    api, web = siblings
    run(api, "edit", "web:0", "renamed")
    assert tasks_of(web) == [("renamed", False, 0)]
    assert tasks_of(api) == [("api task", False, 0)]
