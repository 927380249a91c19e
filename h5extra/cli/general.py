import platform
import tempfile
from pathlib import Path

import h5py
import numpy as np
import typer
from rich import print

from h5extra import __version__

app = typer.Typer()


@app.command("info")
def info():
    """Show information about the system and Python environment."""
    un = platform.uname()
    print(f"[b]System:[/b] {un.system} {un.release} {un.version}")
    print(
        f"[b]Python:[/b] {platform.python_version()} ({platform.python_implementation()})"
    )
    print("[b]Env:[/b]")
    print("h5extra", __version__)
    print("h5py", h5py.version.version)
    print("HDF5", h5py.version.hdf5_version)


@app.command("check")
def check():
    """Run a self-test to ensure that the link operations work correctly."""
    from h5extra import h5backup, h5copy, h5exists, h5move, h5overwrite

    with tempfile.TemporaryDirectory() as tmpdir:
        file = Path(tmpdir) / "test_container.h5"
        other = Path(tmpdir) / "other_container.h5"

        print("Creating HDF5 container with test data...")
        with h5py.File(file, "w") as f:
            f["X"] = np.arange(20 * 80).reshape(20, 80)
            f["obsm/pca"] = np.zeros((19, 80))
            f.create_group("obs").attrs["encoding-type"] = "dataframe"
            f.attrs["encoding-type"] = "anndata"

        print("Copying, moving and overwriting links...")
        h5copy(file, "obsm", other, "obsm", verbose=False)
        h5move(other, "obsm/pca", "obsm/pca2", verbose=False)
        h5overwrite(file, "X", True)
        backup = h5backup(file, Path(tmpdir) / "backup.h5", exclude=["obsm"], verbose=False)

        failed = []
        if h5exists(file, "X"):
            failed.append("overwritten link 'X' still exists")
        if not h5exists(other, "obsm/pca2"):
            failed.append("moved link 'obsm/pca2' is missing")
        if h5exists(backup, "obsm") or not h5exists(backup, "obs"):
            failed.append("backup does not match the excluded links")

    if failed:
        for msg in failed:
            print(f"[b][red]Self-check failed:[/red][/b] {msg}")
        raise typer.Exit(1)

    print("[b][green]Self-check successfully completed![/green][/b]")
