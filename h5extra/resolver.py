"""
Resolution of (reference, link name) pairs to open h5py objects.

A location inside a container can be referenced in different ways:

* by a filesystem path of the container (it is opened on demand),
* by an open `h5py.File` (file-scope handle, names are relative to the root),
* by an open `h5py.Group` or `h5py.Dataset` (sub-scope handle).

For sub-scope handles, names written with a leading `/` are absolute
container paths, all other names are relative to the handle location.
The root `/` itself cannot be addressed through a sub-scope handle.
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import h5py

from .errors import MalformedReferenceError, MissingLinkError
from .linkname import SEP, h5abs_name, h5join, is_abs_name
from .opener import h5try_open
from .types import H5Handle, H5Ref, OpenMode, RefKind


def ref_kind(ref: H5Ref) -> RefKind:
    """Return which kind of reference was passed."""
    if isinstance(ref, (str, os.PathLike)):
        return RefKind.path
    if isinstance(ref, h5py.File):
        return RefKind.file
    if isinstance(ref, h5py.Group):
        # a root group obtained from a file behaves like the file itself
        return RefKind.file if ref.name == SEP else RefKind.group
    if isinstance(ref, h5py.Dataset):
        return RefKind.dataset
    raise TypeError(f"Unsupported container reference: {ref!r}")


def is_void_name(ref: H5Ref, name: Optional[str]) -> bool:
    """Return whether the name can never address a link with given reference.

    This is the case for `.`, and for an empty name passed with a sub-scope handle.
    """
    if name == ".":
        return True
    return name == "" and ref_kind(ref) in (RefKind.group, RefKind.dataset)


def link_name(ref: H5Ref, name: Optional[str] = None) -> str:
    """Return the absolute container path addressed by a reference and a name.

    Raises:
        MalformedReferenceError: if the root is addressed through a sub-scope handle.
    """
    kind = ref_kind(ref)
    if kind in (RefKind.path, RefKind.file):
        return h5abs_name(name)

    own = ref.name
    if name is None:
        return own
    abs_name = h5abs_name(name)
    if abs_name == SEP and name != "":
        msg = f"Cannot address a container root relative to a sub-scope handle ({own})"
        raise MalformedReferenceError(msg)
    if is_abs_name(name):
        return abs_name
    return h5join(own, name)


def ref_filename(ref: H5Ref) -> Path:
    """Return the canonical filesystem identity of the referenced container."""
    if ref_kind(ref) == RefKind.path:
        return Path(ref).resolve()
    return Path(ref.file.filename).resolve()


def _lookup(file: h5py.File, name: str) -> H5Handle:
    """Return object at absolute name in an open file, or raise MissingLinkError."""
    if name == SEP:
        return file
    if not h5exists_in(file, name):
        raise MissingLinkError(f"Object '{name}' does not exist in '{file.filename}'")
    return file[name]


def h5exists_in(file: h5py.Group, name: str) -> bool:
    """Return whether an absolute name exists in an open file.

    Walks the path segment by segment, so that paths leading through
    a dataset or containing `.` segments simply do not exist.
    """
    if name == SEP:
        return True
    node = file.file
    for seg in name.strip(SEP).split(SEP):
        if seg in (".", "..") or not isinstance(node, h5py.Group):
            return False
        if seg not in node:
            return False
        node = node[seg]
    return True


def h5open(ref: H5Ref, name: Optional[str] = None, mode: OpenMode = "r") -> H5Handle:
    """Open a link in a container.

    Args:
        ref: container path or an open file, group or dataset
        name: name of the link (absolute, or relative to a sub-scope handle)
        mode: file open mode, only used if `ref` is a path

    Returns:
        The opened `h5py.File` (for the root), `h5py.Group` or `h5py.Dataset`.
        If `ref` is a path, the caller must close the file (`obj.file.close()`).

    Raises:
        MalformedReferenceError: for the root addressed through a sub-scope handle.
        MissingLinkError: if the link does not exist.
    """
    kind = ref_kind(ref)
    if kind != RefKind.path:
        if is_void_name(ref, name):
            raise MissingLinkError(f"Object '{name}' does not exist in '{ref.file.filename}'")
        target = link_name(ref, name)
        if kind != RefKind.file and target == ref.name:
            return ref
        return _lookup(ref.file, target)

    target = link_name(ref, name)
    h5fh = h5try_open(ref, mode)
    try:
        if is_void_name(ref, name):
            raise MissingLinkError(f"Object '{name}' does not exist in '{h5fh.filename}'")
        return _lookup(h5fh, target)
    except BaseException:
        h5fh.close()
        raise


@contextmanager
def opened(ref: H5Ref, name: Optional[str] = None, mode: OpenMode = "r") -> Iterator[H5Handle]:
    """Like `h5open`, but as context manager closing files it had to open."""
    obj = h5open(ref, name, mode)
    try:
        yield obj
    finally:
        if ref_kind(ref) == RefKind.path:
            obj.file.close()


@contextmanager
def container(ref: H5Ref, mode: OpenMode = "r") -> Iterator[h5py.File]:
    """Yield the open file a reference belongs to, opening (and closing) it if needed."""
    if ref_kind(ref) != RefKind.path:
        yield ref.file
        return
    h5fh = h5try_open(ref, mode)
    try:
        yield h5fh
    finally:
        h5fh.close()
