"""
Unit tests for the navigation registry (tutel/nav.py).
"""

import pytest

from tutel import nav
from tutel.config import PROJECT_FILE_NAME
from tutel.errors import NavError


def _project(tmp_path, name):
    directory = tmp_path / name
    directory.mkdir()
    (directory / PROJECT_FILE_NAME).write_text(f'name = "{name}"\ntasks = []\n', encoding='utf-8')
    return directory


def test_add_and_query(tmp_path):
    nav_file = tmp_path / "data" / "tutelnav"
    directory = _project(tmp_path, "web")

    nav.add("web", directory, nav_file)

    assert nav.query("web", nav_file) == directory
    assert nav_file.read_text(encoding='utf-8') == f"web {directory}\n"


def test_query_without_registry(tmp_path):
    with pytest.raises(NavError, match="no projects added yet"):
        nav.query("web", tmp_path / "tutelnav")


def test_query_unknown_name(tmp_path):
    nav_file = tmp_path / "tutelnav"
    nav.add("web", _project(tmp_path, "web"), nav_file)
    with pytest.raises(NavError, match="no project found with name api"):
        nav.query("api", nav_file)


def test_name_must_match_whole_word(tmp_path):
    nav_file = tmp_path / "tutelnav"
    nav.add("website", _project(tmp_path, "website"), nav_file)
    with pytest.raises(NavError):
        nav.query("web", nav_file)


def test_duplicate_name_rejected(tmp_path):
    nav_file = tmp_path / "tutelnav"
    nav.add("web", _project(tmp_path, "web"), nav_file)
    with pytest.raises(NavError, match="already exists"):
        nav.add("web", tmp_path, nav_file)


def test_name_with_whitespace_rejected(tmp_path):
    with pytest.raises(NavError):
        nav.add("my project", tmp_path, tmp_path / "tutelnav")


def test_stale_entry_is_dropped(tmp_path):
    nav_file = tmp_path / "tutelnav"
    gone = _project(tmp_path, "gone")
    kept = _project(tmp_path, "kept")
    nav.add("gone", gone, nav_file)
    nav.add("kept", kept, nav_file)

    (gone / PROJECT_FILE_NAME).unlink()

    with pytest.raises(NavError, match="no project found with name gone"):
        nav.query("gone", nav_file)
    assert nav_file.read_text(encoding='utf-8') == f"kept {kept}\n"
    assert nav.query("kept", nav_file) == kept


def test_path_with_spaces(tmp_path):
    nav_file = tmp_path / "tutelnav"
    directory = _project(tmp_path, "with space")
    nav.add("spaced", directory, nav_file)
    assert nav.query("spaced", nav_file) == directory


def test_find_entry():
    lines = ["a /x", "ab /y"]
    assert nav.find_entry("ab", lines) == (1, "ab /y")
    assert nav.find_entry("b", lines) is None
