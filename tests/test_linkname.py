import pytest
from hypothesis import given
from hypothesis import strategies as st

from h5extra.linkname import (
    exclude_names,
    h5abs_name,
    h5base_name,
    h5join,
    h5parent_name,
    h5rel_name,
    is_abs_name,
    is_subpath,
)


def test_h5abs_name():
    assert h5abs_name("ggg") == "/ggg"
    assert h5abs_name("ggg/ddd") == "/ggg/ddd"
    assert h5abs_name("ggg///ddd") == "/ggg/ddd"
    assert h5abs_name("a///b") == "/a/b"
    assert h5abs_name("//a/b/") == "/a/b"
    assert h5abs_name(None) == "/"
    assert h5abs_name("") == "/"
    assert h5abs_name("/") == "/"
    assert h5abs_name("///") == "/"
    assert h5abs_name(" \t\n") == "/"
    assert h5abs_name("\x00\x01") == "/"


@given(st.one_of(st.none(), st.text()))
def test_h5abs_name_idempotent(name):
    once = h5abs_name(name)
    assert h5abs_name(once) == once
    assert once.startswith("/")
    assert "//" not in once


def test_is_abs_name():
    assert is_abs_name("/a")
    assert not is_abs_name("a")
    assert not is_abs_name("")
    assert not is_abs_name(None)


def test_parent_base_join():
    assert h5parent_name("/a/b/c") == "/a/b"
    assert h5parent_name("a") == "/"
    assert h5parent_name("/") == "/"

    assert h5base_name("/a/b") == "b"
    assert h5base_name("/") == ""

    assert h5join("/obs", "groups") == "/obs/groups"
    assert h5join("/", "obs//groups/") == "/obs/groups"


def test_h5rel_name():
    assert h5rel_name("/obsm/pca", "/obsm") == "pca"
    assert h5rel_name("/obsm/pca", "/") == "obsm/pca"
    assert h5rel_name("/obsm", "/obsm") == ""
    with pytest.raises(ValueError):
        h5rel_name("/obsm2/pca", "/obsm")


def test_is_subpath():
    assert is_subpath("/obs", "/obs")
    assert is_subpath("/obs/a/b", "/obs")
    assert is_subpath("/obs", "/")
    assert is_subpath("obs/a", "obs")
    assert not is_subpath("/obs2", "/obs")
    assert not is_subpath("/obs", "/obs/a")
    assert not is_subpath("/var/obs", "/obs")


def test_exclude_names():
    names = ["/X", "/obs", "/obs/a", "/obs2", "/obs2/b", "/var"]
    assert exclude_names(names, []) == names
    assert exclude_names(names, ["obs"]) == ["/X", "/obs2", "/obs2/b", "/var"]
    assert exclude_names(names, ["/obs/a", "X"]) == ["/obs", "/obs2", "/obs2/b", "/var"]
    assert exclude_names(names, ["/"]) == []
    assert exclude_names(names, ["/nothing"]) == names
