"""
Backing up containers and overwriting links in existing containers.

HDF5 offers no transactions, so replacing a link inside of a container is done
by renaming the container to a temporary file next to it, reconstructing the
container at the original path without that link, and restoring the renamed
original if anything goes wrong during the reconstruction.
"""
from __future__ import annotations

import logging
import os
import secrets
import shutil
import tempfile
import warnings
from pathlib import Path
from typing import Iterable, Optional, Union

from .config import resolve_verbose
from .copy import h5copy_attrs
from .errors import H5ExtraWarning, LinkExistsError
from .inspect import h5exists, h5list
from .linkname import SEP, exclude_names, h5abs_name, h5parent_name
from .opener import h5create_file, h5try_open
from .types import LinkKind
from .util import verbose_msg

logger = logging.getLogger(__name__)


def _tmp_h5_path(dir: Optional[Path] = None) -> Path:
    """Return a fresh (not existing) path for a HDF5 file."""
    tmpdir = Path(dir or tempfile.gettempdir())
    while True:
        path = tmpdir / f"{secrets.token_hex(8)}.h5"
        if not path.exists():
            return path


def h5backup(
    from_file: Union[str, Path],
    to_file: Optional[Union[str, Path]] = None,
    exclude: Iterable[str] = (),
    overwrite: bool = False,
    verbose: Optional[bool] = None,
) -> Path:
    """Back up the contents of one HDF5 file to another, optionally excluding links.

    If no link is excluded, the file is simply copied byte by byte.
    Otherwise, all remaining groups and datasets are copied one by one,
    together with their attributes (including those of the root).
    Excluding a group excludes its whole subtree.

    Args:
        from_file: the source file
        to_file: the target file (default: new file in the temporary directory)
        exclude: names of links not to be backed up
        overwrite: whether to overwrite an existing target file
        verbose: log progress (default: `options.verbose`)

    Returns:
        Absolute path of the target file.

    Raises:
        ValueError: if source and target are the same file.
        FileExistsError: if the target exists and `overwrite` is not set.
    """
    verbose = resolve_verbose(verbose)
    to_file = Path(to_file or _tmp_h5_path()).resolve()
    from_file = Path(from_file).resolve(strict=True)
    exclude = [h5abs_name(e) for e in exclude]
    verbose_msg(
        logger,
        verbose,
        "h5backup: ",
        "\n  Source file: ", from_file,
        "\n  Destination file: ", to_file,
        "\n  Excluded objects: ", ", ".join(exclude),
    )
    if from_file == to_file:
        raise ValueError("The source file and the target file are identical.")
    if not overwrite and to_file.exists():
        raise FileExistsError(f"The destination file '{to_file}' exists, set 'overwrite=True'")

    with h5try_open(from_file, "r") as h5fh:
        links = h5list(h5fh, recursive=True, full_names=True, detailed=True)
        keep = exclude_names(links["name"], exclude)
        if len(keep) == len(links):
            shutil.copyfile(from_file, to_file)
            return to_file

        links = links[links["name"].isin(keep)]
        with h5try_open(to_file, "w") as to_h5fh:
            for name, kind in zip(links["name"], links["kind"]):
                verbose_msg(logger, verbose, "Backup '", name, "'")
                if kind == LinkKind.group:
                    to_h5fh.require_group(name)
                else:
                    to_h5fh.require_group(h5parent_name(name))
                    to_h5fh.copy(h5fh[name], name)
                h5copy_attrs(h5fh[name], to_h5fh[name])
            h5copy_attrs(h5fh[SEP], to_h5fh[SEP])
    return to_file


def h5overwrite(file: Union[str, Path], name: Optional[str], overwrite: bool) -> Path:
    """Prepare an existing HDF5 file for writing a link by removing the old one.

    * If `file` does not exist, it is created.
    * If `name` does not exist in the file, nothing is done.
    * If `name` exists and `overwrite` is set, the remaining links are
      backed up into an updated `file` (see `h5backup`). If `name` is the root,
      the whole file is truncated.
    * If `name` exists and `overwrite` is not set, an error is raised.

    If the update fails, the original file is restored before re-raising.

    Returns:
        Absolute path of `file`, ready to be written.

    Raises:
        LinkExistsError: if the link exists and `overwrite` is not set.
    """
    name = h5abs_name(name)
    file = Path(file)
    if not file.exists():
        return h5create_file(file)
    file = file.resolve()

    if name == SEP and overwrite:
        msg = f"Overwrite '/' will truncate anything in the original file:\n  {file}"
        warnings.warn(msg, H5ExtraWarning, stacklevel=2)
        with h5try_open(file, "w"):
            pass
        return file
    if not h5exists(file, name):
        return file
    if not overwrite:
        raise LinkExistsError(
            f"\nFound object that already exists: \n  File: {file}\n  Object: {name}"
            "\nSet 'overwrite=True' to remove it."
        )

    logger.info("Overwriting existing H5 object:\n  File: %s\n  Object: %s", file, name)
    # os.replace needs both paths on the same filesystem
    tmp_file = _tmp_h5_path(file.parent)
    os.replace(file, tmp_file)
    try:
        h5backup(tmp_file, file, exclude=[name], overwrite=True, verbose=False)
    except BaseException:
        os.replace(tmp_file, file)
        raise
    tmp_file.unlink()
    return file
