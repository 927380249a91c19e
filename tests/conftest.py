import secrets
import shutil
from pathlib import Path

import h5py
import numpy as np
import pytest

ADATA_NAMES = ["X", "layers", "obs", "obsm", "obsp", "raw", "uns", "var", "varm", "varp"]
"""Top level links of the test container (in listing order)."""


def fill_h5ad(f: h5py.File):
    """Fill a file with a small AnnData-like structure."""
    rng = np.random.default_rng(42)
    f.attrs["encoding-type"] = "anndata"
    f.attrs["encoding-version"] = "0.1.0"

    f["X"] = rng.random((20, 80))
    f["X"].attrs["unit"] = "counts"

    f.create_group("layers")

    obs = f.create_group("obs")
    obs.attrs["encoding-type"] = "dataframe"
    obs.attrs["_index"] = "_index"
    obs["_index"] = np.array([f"cell{i}" for i in range(80)], dtype="S")
    obs["groups"] = rng.integers(0, 2, 80)
    obs["orig.ident"] = rng.integers(0, 3, 80)
    obs["orig.ident"].attrs["categories"] = "cat"

    obsm = f.create_group("obsm")
    obsm.attrs["encoding-type"] = "dict"
    obsm["pca"] = rng.random((19, 80))
    obsm["tsne"] = rng.random((19, 2))

    f.create_group("obsp")

    raw = f.create_group("raw")
    raw_x = raw.create_group("X")
    raw_x.attrs["shape"] = [20, 80]
    raw_x["data"] = rng.random(100)
    raw_x["indices"] = rng.integers(0, 20, 100)
    raw_x["indptr"] = np.arange(0, 101, 5)

    uns = f.create_group("uns")
    uns.create_group("neighbors").attrs["method"] = "umap"

    var = f.create_group("var")
    var.attrs["encoding-type"] = "dataframe"
    var["_index"] = np.array([f"gene{i}" for i in range(20)], dtype="S")

    f.create_group("varm")
    f.create_group("varp")


@pytest.fixture(scope="session")
def ds_dir(tmpdir_factory):
    """Create a fresh temporary directory for files created in the tests."""
    return Path(tmpdir_factory.mktemp("h5extra_tests"))


@pytest.fixture
def tmp_h5_path_factory(ds_dir):
    """Return a file name generator to be used for creating containers.

    All files will be cleaned up after completing the test.
    """
    names = []

    def fresh_name() -> Path:
        name = secrets.token_hex(4)
        names.append(name)
        return ds_dir / f"{name}.h5"

    yield fresh_name

    # clean up
    for name in names:
        for path in ds_dir.glob(f"{name}*"):
            if path.is_file() or path.is_symlink():
                path.unlink()
            elif path.is_dir():
                shutil.rmtree(path)


@pytest.fixture
def tmp_h5_path(tmp_h5_path_factory):
    """Generate a path for a container that does not exist yet."""
    return tmp_h5_path_factory()


@pytest.fixture(scope="session")
def h5ad_file(ds_dir):
    """Path of a read-only AnnData-like test container (do not modify it!)."""
    path = ds_dir / "pbmc_small.h5ad"
    with h5py.File(path, "w") as f:
        fill_h5ad(f)
    return path


@pytest.fixture
def tmp_h5ad(h5ad_file, tmp_h5_path_factory):
    """Writable copy of the test container."""
    path = tmp_h5_path_factory()
    shutil.copyfile(h5ad_file, path)
    return path


def snapshot(node):
    """Return a comparable nested dict with values and attributes of a group or dataset."""
    attrs = {k: np.asarray(v).tolist() for k, v in node.attrs.items()}
    if isinstance(node, h5py.Dataset):
        return {"attrs": attrs, "value": np.asarray(node[()]).tolist()}
    return {"attrs": attrs, "children": {k: snapshot(v) for k, v in node.items()}}


@pytest.fixture
def read_snapshot():
    """Return function reading the snapshot of a link from a container file."""

    def read(file, name="/"):
        with h5py.File(file, "r") as f:
            return snapshot(f[name])

    return read
