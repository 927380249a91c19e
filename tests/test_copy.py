import h5py
import pytest

from h5extra import h5copy, h5copy_attrs, h5exists, h5list
from h5extra.errors import (
    H5ExtraWarning,
    LinkExistsError,
    MalformedReferenceError,
    MissingLinkError,
)
from h5extra.util import file_hashsum


def test_copy_group_to_new_file(h5ad_file, tmp_h5_path, read_snapshot):
    h5copy(h5ad_file, "obs", tmp_h5_path, "obs")
    assert read_snapshot(tmp_h5_path, "obs") == read_snapshot(h5ad_file, "obs")
    # attributes of the root are not copied along
    assert read_snapshot(tmp_h5_path)["attrs"] == {}


def test_copy_creates_parents(h5ad_file, tmp_h5_path, read_snapshot):
    h5copy(h5ad_file, "obsm/tsne", tmp_h5_path, "obsm/tsne")
    h5copy(h5ad_file, "obsm/pca", tmp_h5_path, "obsm/pca")
    assert h5list(tmp_h5_path, "obsm") == ["pca", "tsne"]
    for name in ["obsm/tsne", "obsm/pca"]:
        assert read_snapshot(tmp_h5_path, name) == read_snapshot(h5ad_file, name)
    # the created parent group is plain, its source attributes are not copied
    assert read_snapshot(tmp_h5_path, "obsm")["attrs"] == {}

    h5copy(h5ad_file, "raw/X/data", tmp_h5_path, "a/b/c/data")
    assert h5exists(tmp_h5_path, "a/b/c/data")


def test_copy_keeps_dataset_attrs(h5ad_file, tmp_h5_path):
    h5copy(h5ad_file, "obs/orig.ident", tmp_h5_path, "ident")
    with h5py.File(tmp_h5_path, "r") as f:
        assert f["ident"].attrs["categories"] == "cat"


def test_copy_root(h5ad_file, tmp_h5_path, read_snapshot):
    h5copy(h5ad_file, "/", tmp_h5_path, "/")
    assert read_snapshot(tmp_h5_path) == read_snapshot(h5ad_file)

    # the destination root is not empty any more
    with pytest.raises(LinkExistsError):
        h5copy(h5ad_file, "/", tmp_h5_path, "/")

    with h5py.File(tmp_h5_path, "a") as f:
        f["extra"] = 1
    h5copy(h5ad_file, "/", tmp_h5_path, "/", overwrite=True)
    assert read_snapshot(tmp_h5_path) == read_snapshot(h5ad_file)

    with pytest.raises(MalformedReferenceError):
        h5copy(h5ad_file, "X", tmp_h5_path, "/", overwrite=True)


def test_copy_existing_destination(h5ad_file, tmp_h5_path, read_snapshot):
    h5copy(h5ad_file, "obsm/pca", tmp_h5_path, "emb")
    with pytest.raises(LinkExistsError):
        h5copy(h5ad_file, "obsm/tsne", tmp_h5_path, "emb")
    assert read_snapshot(tmp_h5_path, "emb") == read_snapshot(h5ad_file, "obsm/pca")

    h5copy(h5ad_file, "obsm/tsne", tmp_h5_path, "emb", overwrite=True)
    assert read_snapshot(tmp_h5_path, "emb") == read_snapshot(h5ad_file, "obsm/tsne")


def test_copy_missing_source(h5ad_file, tmp_h5_path, tmp_h5ad):
    with pytest.raises(MissingLinkError, match="non-existing"):
        h5copy(h5ad_file, "nothing", tmp_h5_path, "nothing")
    with pytest.raises(MissingLinkError):
        h5copy(tmp_h5ad, "nothing", tmp_h5ad, "other")


def test_copy_same_file(tmp_h5ad, read_snapshot):
    h5copy(tmp_h5ad, "obs", tmp_h5ad, "obs2")
    assert read_snapshot(tmp_h5ad, "obs2") == read_snapshot(tmp_h5ad, "obs")

    h5copy(tmp_h5ad, "raw", tmp_h5ad, "uns/raw")
    assert read_snapshot(tmp_h5ad, "uns/raw") == read_snapshot(tmp_h5ad, "raw")

    with pytest.raises(LinkExistsError):
        h5copy(tmp_h5ad, "var", tmp_h5ad, "obs2")
    h5copy(tmp_h5ad, "var", tmp_h5ad, "obs2", overwrite=True)
    assert read_snapshot(tmp_h5ad, "obs2") == read_snapshot(tmp_h5ad, "var")


def test_copy_same_file_nested(tmp_h5ad, read_snapshot):
    before = read_snapshot(tmp_h5ad)
    with pytest.raises(MalformedReferenceError):
        h5copy(tmp_h5ad, "obs", tmp_h5ad, "obs/inner")
    with pytest.raises(MalformedReferenceError):
        h5copy(tmp_h5ad, "raw/X", tmp_h5ad, "raw", overwrite=True)
    with pytest.raises(MalformedReferenceError):
        h5copy(tmp_h5ad, "/", tmp_h5ad, "backup")
    assert read_snapshot(tmp_h5ad) == before


def test_copy_identical(tmp_h5ad):
    before = file_hashsum(tmp_h5ad)
    with pytest.warns(H5ExtraWarning, match="identical"):
        h5copy(tmp_h5ad, "obs", tmp_h5ad, "/obs/")
    assert file_hashsum(tmp_h5ad) == before


def test_copy_with_handles(h5ad_file, tmp_h5_path, read_snapshot):
    with h5py.File(h5ad_file, "r") as src, h5py.File(tmp_h5_path, "w") as dst:
        dst.create_group("obsm")
        h5copy(src["obsm"], "pca", dst["obsm"], "pca")
        h5copy(src["obsm"], "/X", dst, "X")
    assert read_snapshot(tmp_h5_path, "obsm/pca") == read_snapshot(h5ad_file, "obsm/pca")
    assert read_snapshot(tmp_h5_path, "X") == read_snapshot(h5ad_file, "X")


def test_copy_same_file_with_handle(tmp_h5ad, read_snapshot):
    with h5py.File(tmp_h5ad, "r+") as f:
        h5copy(f, "obsm", f, "obsm_copy")
        assert "obsm_copy" in f
    assert read_snapshot(tmp_h5ad, "obsm_copy") == read_snapshot(tmp_h5ad, "obsm")


def test_copy_attrs(tmp_h5ad):
    with h5py.File(tmp_h5ad, "r+") as f:
        f["var"].attrs["encoding-type"] = "other"
        f["var"].attrs["own"] = 1
        h5copy_attrs(f["obs"], f["var"], overwrite=False)
        assert f["var"].attrs["encoding-type"] == "other"
        assert f["var"].attrs["_index"] == "_index"
        h5copy_attrs(f["obs"], f["var"])
        assert f["var"].attrs["encoding-type"] == "dataframe"
        assert f["var"].attrs["own"] == 1
